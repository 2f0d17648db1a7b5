"""Perch CLI — start the static content server.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"

Flags override environment variables, which override defaults::

    perch --content-dir ./site --content-dir ./site/assets --port 8090
"""

import argparse
import sys

from perch.config import LOG_FORMATS, LOG_LEVELS, ServerConfig
from perch.errors import ConfigurationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Serve a static site from an ordered list of content directories.",
    )
    parser.add_argument("--host", default=None, help="Bind host address (default 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port number (default 8090)")
    parser.add_argument(
        "--content-dir",
        dest="content_dirs",
        action="append",
        default=None,
        metavar="DIR",
        help="Content root; repeat for more. Earlier roots win.",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None)
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=None)
    parser.add_argument(
        "--no-access-log",
        dest="access_log",
        action="store_false",
        default=None,
        help="Do not log one line per request",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Merge parsed flags over ``ServerConfig.from_env()``."""
    content_dirs = tuple(args.content_dirs) if args.content_dirs is not None else None
    return ServerConfig.from_env(
        host=args.host,
        port=args.port,
        content_dirs=content_dirs,
        log_level=args.log_level,
        log_format=args.log_format,
        access_log=args.access_log,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    from perch.app import App

    App(config).run()
