"""Liveness / readiness probe endpoints.

  GET /live            liveness checks only
  GET /ready           readiness + liveness checks
  ?full=1              per-check results and metadata in the body
  any other method     405

Paths come from settings; see ``build_probe_router``.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthprobe.health.registry import STATUS_OK, CheckRegistry, CheckSet

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
EMPTY_BODY = "{}\n"

METHOD_NOT_ALLOWED = "method not allowed"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


class ProbeHandler:
    """Runs registry check sets per request and renders the probe response."""

    def __init__(self, registry: CheckRegistry) -> None:
        self.registry = registry

    def liveness_endpoint(self, request: Request) -> Response:
        return self.handle(request, CheckSet.LIVENESS)

    def readiness_endpoint(self, request: Request) -> Response:
        # Not ready unless alive. Liveness merges last and wins on name clashes.
        return self.handle(request, CheckSet.READINESS, CheckSet.LIVENESS)

    def handle(self, request: Request, *check_sets: CheckSet) -> Response:
        if request.method != "GET":
            return PlainTextResponse(METHOD_NOT_ALLOWED, status_code=405)

        checks: dict[str, str] = {}
        status = STATUS_OK
        for check_set in check_sets:
            status = self.registry.collect_checks(check_set, checks, status)

        # Orchestrators only look at the status code; skip the body unless asked
        # First value wins: ?full=1&full=0 still asks for the full body
        if request.query_params.getlist("full")[:1] != ["1"]:
            return Response(EMPTY_BODY, status_code=status, media_type=JSON_CONTENT_TYPE)

        body = ""
        try:
            body = json.dumps(
                {"checks": checks, "metadata": dict(self.registry.metadata)},
                indent=4,
                sort_keys=True,
                ensure_ascii=False,
            ) + "\n"
        except (TypeError, ValueError):
            logger.exception("Failed to encode probe response")
        return Response(body, status_code=status, media_type=JSON_CONTENT_TYPE)


def build_probe_router(
    handler: ProbeHandler,
    liveness_path: str = "/live",
    readiness_path: str = "/ready",
) -> APIRouter:
    """Mount both endpoints for every method so the handler answers 405 itself."""
    router = APIRouter(tags=["Health"])
    router.add_api_route(
        liveness_path,
        handler.liveness_endpoint,
        methods=ALL_METHODS,
        summary="Liveness probe",
    )
    router.add_api_route(
        readiness_path,
        handler.readiness_endpoint,
        methods=ALL_METHODS,
        summary="Readiness probe",
    )
    return router


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Plain-text 405 for verbs the router never hands to a probe endpoint."""
    if exc.status_code == 405:
        return PlainTextResponse(METHOD_NOT_ALLOWED, status_code=405)
    return await http_exception_handler(request, exc)
