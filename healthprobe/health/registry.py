"""Check registry: two named check sets guarded by a read/write lock.

Probe requests read concurrently; registration writes exclusively. The
registry is built once by the caller and handed to the server wiring.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from enum import Enum
from types import MappingProxyType

from .checks import Check, run_check

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_UNAVAILABLE = 503

RESULT_OK = "OK"


class CheckSet(str, Enum):
    LIVENESS = "liveness"
    READINESS = "readiness"


class RWLock:
    """Many readers or one writer. Waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class CheckRegistry:
    """Liveness and readiness checks by name, plus static response metadata."""

    def __init__(self, metadata: Mapping[str, str] | None = None) -> None:
        self._lock = RWLock()
        self._checks: dict[CheckSet, dict[str, Check]] = {
            CheckSet.LIVENESS: {},
            CheckSet.READINESS: {},
        }
        # Write-once; read without locking
        self._metadata = MappingProxyType(dict(metadata or {}))

    @property
    def metadata(self) -> Mapping[str, str]:
        return self._metadata

    def add_liveness_check(self, name: str, check: Check) -> None:
        """Register (or replace) a liveness check."""
        self._add(CheckSet.LIVENESS, name, check)

    def add_readiness_check(self, name: str, check: Check) -> None:
        """Register (or replace) a readiness check."""
        self._add(CheckSet.READINESS, name, check)

    def _add(self, check_set: CheckSet, name: str, check: Check) -> None:
        with self._lock.write():
            self._checks[check_set][name] = check
        logger.debug("Registered %s check %r", check_set.value, name)

    def names(self, check_set: CheckSet) -> list[str]:
        with self._lock.read():
            return list(self._checks[check_set])

    def collect_checks(
        self,
        check_set: CheckSet,
        results: dict[str, str],
        status: int = STATUS_OK,
    ) -> int:
        """Run every check in ``check_set`` into ``results``.

        Checks run one after another under the read lock. Returns 503 if any
        check failed, otherwise ``status`` unchanged.
        """
        with self._lock.read():
            for name, check in self._checks[check_set].items():
                reason = run_check(check)
                if reason is None:
                    results[name] = RESULT_OK
                else:
                    logger.warning("%s check %r failed: %s", check_set.value, name, reason)
                    results[name] = reason
                    status = STATUS_UNAVAILABLE
        return status
