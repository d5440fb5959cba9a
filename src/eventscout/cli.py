"""``eventscout`` command: load settings, apply overrides, serve the API."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eventscout.config.settings import Settings

_APP_FACTORY = "eventscout.api.app:create_app"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eventscout",
        description="EventScout — federated event search server",
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="YAML settings file")
    parser.add_argument("--host", type=str, default=None, help="Bind address")
    parser.add_argument("--port", "-p", type=int, default=None, help="Listen port")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Uvicorn worker processes")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Root log level",
    )
    parser.add_argument(
        "--no-external",
        action="store_true",
        help="Serve local events only, even if a Ticketmaster API key is configured",
    )
    parser.add_argument("--version", action="version", version=f"EventScout {_get_version()}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point of the ``eventscout`` console script."""
    args = build_parser().parse_args(argv)

    from eventscout.observability.logging import setup_logging

    settings = _load_settings(args.config)
    _apply_overrides(settings, args)

    setup_logging(settings.observability)
    _check_port(settings.server.host, settings.server.port)

    import uvicorn

    server = settings.server
    log_level = settings.observability.log_level

    if args.reload or server.workers > 1:
        # Each worker imports the factory itself and only sees the environment.
        _export_overrides(args)
        uvicorn.run(
            _APP_FACTORY,
            factory=True,
            host=server.host,
            port=server.port,
            workers=1 if args.reload else server.workers,
            reload=args.reload,
            log_level=log_level,
        )
        return

    from eventscout.api.app import create_app

    uvicorn.run(create_app(settings), host=server.host, port=server.port, log_level=log_level)


def _load_settings(config: str | None) -> Settings:
    from eventscout.config.settings import Settings

    if not config:
        return Settings()
    path = Path(config)
    if not path.exists():
        print(f"Error: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)
    return Settings.from_yaml(path)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> None:
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers
    if args.log_level:
        settings.observability.log_level = args.log_level
    if args.no_external:
        settings.ticketmaster.enabled = False


def _export_overrides(args: argparse.Namespace) -> None:
    env = {
        "EVENTSCOUT_CONFIG_FILE": str(Path(args.config).resolve()) if args.config else None,
        "EVENTSCOUT_SERVER__HOST": args.host,
        "EVENTSCOUT_SERVER__PORT": str(args.port) if args.port else None,
        "EVENTSCOUT_OBSERVABILITY__LOG_LEVEL": args.log_level,
        "EVENTSCOUT_TICKETMASTER__ENABLED": "false" if args.no_external else None,
    }
    os.environ.update({k: v for k, v in env.items() if v})


def _check_port(host: str, port: int) -> None:
    """Exit with a readable message if *port* is already bound."""
    import socket

    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        probe.bind(("127.0.0.1" if host == "0.0.0.0" else host, port))
    except OSError:
        print(f"Error: Port {port} is already in use. Run 'lsof -i :{port}' to find the process.", file=sys.stderr)
        sys.exit(1)
    finally:
        probe.close()


def _get_version() -> str:
    from eventscout import __version__

    return __version__


if __name__ == "__main__":
    main()
