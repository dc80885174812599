"""Shared test fixtures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from healthprobe.api.server import create_app
from healthprobe.config import Settings
from healthprobe.health.registry import CheckRegistry


@pytest.fixture
def metadata() -> dict[str, str]:
    return {"version": "1.2.3", "commit": "abc123"}


@pytest.fixture
def registry(metadata: dict[str, str]) -> CheckRegistry:
    return CheckRegistry(metadata=metadata)


@pytest.fixture
def probe_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Defaults only; ignores .env and any HEALTH_* variables in the environment."""
    for var in ("HEALTH_LIVENESS_PATTERN", "HEALTH_READYNESS_PATTERN", "HEALTH_METADATA"):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def client(registry: CheckRegistry, probe_settings: Settings) -> TestClient:
    return TestClient(create_app(registry=registry, settings=probe_settings))
