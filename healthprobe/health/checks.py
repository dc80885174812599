"""Check primitives: the callable contract plus ready-made checks.

A check is any zero-argument callable. Returning normally means healthy;
raising means unhealthy, with ``str(exc)`` as the reason reported to clients.
"""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


# ── Contract ─────────────────────────────────────────────────────────────────


class Check(Protocol):
    """Executes once; raises to report failure."""

    def __call__(self) -> None: ...


class CheckError(Exception):
    """Raised by a check to report an expected failure."""


def run_check(check: Check) -> str | None:
    """Run a single check. Returns None when healthy, else the failure reason."""
    try:
        check()
    except CheckError as e:
        return str(e)
    except Exception as e:
        logger.exception("Health check raised unexpectedly")
        message = str(e)
        return f"{type(e).__name__}: {message}" if message else type(e).__name__
    return None


# ── Check factories ──────────────────────────────────────────────────────────


def http_get_check(url: str, timeout: float = DEFAULT_TIMEOUT) -> Check:
    """HTTP GET must answer 200. Redirects are not followed."""

    def check() -> None:
        try:
            with httpx.Client(timeout=timeout, follow_redirects=False) as client:
                resp = client.get(url)
        except httpx.TimeoutException:
            raise CheckError(f"request to {url} timed out ({timeout}s)")
        except httpx.HTTPError as e:
            raise CheckError(f"request to {url} failed: {e}")
        if resp.status_code != 200:
            raise CheckError(f"returned status {resp.status_code}")

    return check


def tcp_dial_check(addr: str, timeout: float = DEFAULT_TIMEOUT) -> Check:
    """Raw TCP connect to ``host:port``."""
    host, _, port = addr.rpartition(":")
    if not host or not port.isdigit():
        raise ValueError(f"address must be host:port, got {addr!r}")
    host = host.strip("[]")  # bracketed IPv6

    def check() -> None:
        try:
            sock = socket.create_connection((host, int(port)), timeout=timeout)
        except OSError as e:
            raise CheckError(f"dial {addr} failed: {e}")
        sock.close()

    return check


def dns_resolve_check(host: str, timeout: float = DEFAULT_TIMEOUT) -> Check:
    """Host name must resolve to at least one address."""

    def resolve() -> None:
        try:
            addrs = socket.getaddrinfo(host, None)
        except socket.gaierror as e:
            raise CheckError(f"DNS resolution failed for {host}: {e}")
        if not addrs:
            raise CheckError(f"no addresses found for {host}")

    # getaddrinfo has no timeout of its own
    return timeout_check(resolve, timeout)


def thread_count_check(threshold: int) -> Check:
    """Fails when the process runs more than ``threshold`` threads."""

    def check() -> None:
        count = threading.active_count()
        if count > threshold:
            raise CheckError(f"too many threads ({count} > {threshold})")

    return check


def timeout_check(check: Callable[[], None], timeout: float) -> Check:
    """Wrap ``check`` so that a run longer than ``timeout`` seconds fails.

    The wrapped call cannot be interrupted: it keeps running on a daemon
    thread and whatever it eventually returns or raises is discarded. While
    such an abandoned run is still going, further calls fail immediately
    instead of starting another thread.
    """
    lock = threading.Lock()
    abandoned: Future[None] | None = None

    def wrapped() -> None:
        nonlocal abandoned
        with lock:
            if abandoned is not None and not abandoned.done():
                raise CheckError(f"previous run still in progress (timed out after {timeout}s)")
            abandoned = None

        future: Future[None] = Future()

        def run() -> None:
            try:
                check()
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result(None)

        threading.Thread(target=run, name="timeout-check", daemon=True).start()
        try:
            future.result(timeout=timeout)
        except FutureTimeoutError:
            with lock:
                abandoned = future
            raise CheckError(f"timed out after {timeout}s")

    return wrapped
