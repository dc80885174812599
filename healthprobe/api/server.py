"""FastAPI server exposing the liveness and readiness probes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthprobe.api.probe_routes import ProbeHandler, build_probe_router, method_not_allowed_handler
from healthprobe.config import Settings, settings as default_settings
from healthprobe.health.checks import http_get_check, tcp_dial_check, thread_count_check
from healthprobe.health.registry import CheckRegistry, CheckSet

logger = logging.getLogger(__name__)


def register_configured_checks(registry: CheckRegistry, settings: Settings) -> None:
    """Register the checks declared in settings (standalone / sidecar use)."""
    if settings.health_max_threads > 0:
        registry.add_liveness_check("threads", thread_count_check(settings.health_max_threads))
    for name, url in settings.health_ready_urls.items():
        registry.add_readiness_check(name, http_get_check(url, settings.health_check_timeout))
    for name, addr in settings.health_ready_tcp.items():
        registry.add_readiness_check(name, tcp_dial_check(addr, settings.health_check_timeout))


def create_app(
    registry: CheckRegistry | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or default_settings
    if registry is None:
        registry = CheckRegistry(metadata=settings.health_metadata)
        register_configured_checks(registry, settings)

    liveness_path = settings.health_liveness_pattern
    readiness_path = settings.health_readyness_pattern

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Probes mounted: liveness=%s (%d checks) readiness=%s (%d checks)",
            liveness_path,
            len(registry.names(CheckSet.LIVENESS)),
            readiness_path,
            len(registry.names(CheckSet.READINESS)),
        )
        yield

    app = FastAPI(
        title="healthprobe",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)
    app.include_router(build_probe_router(ProbeHandler(registry), liveness_path, readiness_path))

    return app
