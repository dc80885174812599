"""healthprobe: liveness and readiness probes for orchestrators."""

from healthprobe.api.probe_routes import ProbeHandler, build_probe_router
from healthprobe.health import Check, CheckError, CheckRegistry, CheckSet

__all__ = [
    "Check",
    "CheckError",
    "CheckRegistry",
    "CheckSet",
    "ProbeHandler",
    "build_probe_router",
]
