"""Health subsystem: check contract, ready-made checks, check registry."""

from .checks import (
    Check,
    CheckError,
    dns_resolve_check,
    http_get_check,
    run_check,
    tcp_dial_check,
    thread_count_check,
    timeout_check,
)
from .registry import CheckRegistry, CheckSet, RWLock
