"""Entry point for healthprobe: `healthprobe` console script."""

from __future__ import annotations

import argparse
import logging
import sys

import httpx
import uvicorn
from rich.console import Console
from rich.panel import Panel

from healthprobe.config import settings

console = Console()


def run_server() -> None:
    """Start the probe server."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    console.print(
        Panel.fit(
            f"[bold]healthprobe[/bold]\n"
            f"Bind:      {settings.api_host}:{settings.api_port}\n"
            f"Liveness:  {settings.health_liveness_pattern}\n"
            f"Readiness: {settings.health_readyness_pattern}\n"
            f"Metadata:  {len(settings.health_metadata)} keys",
            title="healthprobe",
            border_style="green",
        )
    )

    uvicorn.run(
        "healthprobe.api.server:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


def run_probe(url: str, full: bool = False, timeout: float = 5.0) -> int:
    """Hit a probe endpoint once. Returns the process exit code."""
    try:
        with httpx.Client(timeout=timeout) as client:
            resp = client.get(url, params={"full": "1"} if full else None)
    except httpx.HTTPError as e:
        console.print(f"[red]unreachable:[/red] {url} ({type(e).__name__}: {e})")
        return 1

    style = "green" if resp.status_code == 200 else "red"
    console.print(f"[{style}]{resp.status_code}[/{style}] {url}")
    if full:
        console.print(resp.text.rstrip("\n"), markup=False)
    return 0 if resp.status_code == 200 else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Liveness / readiness probe server")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Start the probe server")

    probe_parser = sub.add_parser("probe", help="Query a probe endpoint (exit 0 when healthy)")
    probe_parser.add_argument("url", help="Probe URL, e.g. http://localhost:8000/ready")
    probe_parser.add_argument("--full", action="store_true", help="Request and print per-check results")
    probe_parser.add_argument("--timeout", type=float, default=5.0, help="Request timeout in seconds")

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "probe":
        sys.exit(run_probe(args.url, full=args.full, timeout=args.timeout))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
