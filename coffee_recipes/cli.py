"""Console entry point for the service."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Optional

import uvicorn

from .app import create_app
from .config import ConfigError, Settings, load_settings, resolve_config_dir
from .log import configure_logging, mask_api_key

log = logging.getLogger(__name__)


def _load_or_exit(config_dir: Optional[str]) -> Settings:
    cfg_dir = resolve_config_dir(config_dir)
    try:
        return load_settings(cfg_dir)
    except ConfigError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(1)


def _serve_uvicorn(settings: Settings, host: str, port: int) -> None:
    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
        # configure_logging already installed our handlers
        log_config=None,
        access_log=False,
    )
    server = uvicorn.Server(config)
    app.state.server = server
    log.info("Starting server on %s:%d", host, port)
    server.run()


def _command_start(args: argparse.Namespace) -> None:
    settings = _load_or_exit(getattr(args, "config_dir", None))
    configure_logging(settings)
    log.info("Configuration loaded successfully")

    host = getattr(args, "host", None) or settings.server.host
    port_override = getattr(args, "port", None)
    port = port_override if port_override is not None else settings.server.port
    if not 0 < port < 65536:
        print(f"[error] Port out of range: {port}", file=sys.stderr)
        sys.exit(2)

    print(f"coffee-recipes starting on http://{host}:{port}")
    _serve_uvicorn(settings, host, port)


def _command_config(args: argparse.Namespace) -> None:
    settings = _load_or_exit(args.config_dir)
    data = asdict(settings)
    data["openai"]["api_key"] = mask_api_key(settings.openai.api_key)
    json.dump(data, sys.stdout, indent=2)
    sys.stdout.write("\n")


CONFIG_DIR_HELP = "Directory containing config.json and config.override.json"


def _start_options(default):
    # Subcommands use SUPPRESS so they do not reset flags given before the subcommand name
    options = argparse.ArgumentParser(add_help=False, argument_default=default)
    options.add_argument("--config-dir", help=CONFIG_DIR_HELP)
    options.add_argument("--host", help="Override listen host")
    options.add_argument("--port", type=int, help="Override listen port (beats PORT)")
    return options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="coffee-recipes service", parents=[_start_options(None)])
    subparsers = parser.add_subparsers(dest="command")

    start_parser = subparsers.add_parser(
        "start", help="Run the HTTP service", parents=[_start_options(argparse.SUPPRESS)]
    )
    start_parser.set_defaults(func=_command_start)

    config_parser = subparsers.add_parser("config", help="Print the resolved configuration")
    config_parser.add_argument("--config-dir", default=argparse.SUPPRESS, help=CONFIG_DIR_HELP)
    config_parser.set_defaults(func=_command_config)

    parser.set_defaults(func=_command_start)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":  # pragma: no cover
    main()
