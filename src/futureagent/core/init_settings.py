"""
Mode-aware settings for the whole process.

    from futureagent.core.init_settings import settings

The server entrypoint (``python -m futureagent.main``) takes ``--mode``,
``--host`` and ``--port``. Everything else (uvicorn, pytest, the maintenance
modules) reads the mode from ``APP_MODE`` and leaves ``sys.argv`` alone.
"""
import argparse
import os
import sys

from futureagent.core.config import get_settings

# Hosting platforms inject PORT
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
DEFAULT_HOST = "127.0.0.1"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Future Agent data service")
    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default=os.getenv("APP_MODE", "dev"),
        help="Running mode: dev (SQLite) or prod (PostgreSQL)",
    )
    parser.add_argument("--host", default=DEFAULT_HOST, help="Host to bind to")
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help="Port to bind to (default: $PORT or 8000)",
    )
    return parser


def resolve_args(argv: list[str] = sys.argv) -> argparse.Namespace:
    if argv and argv[0].endswith(os.path.join("futureagent", "main.py")):
        return build_parser().parse_args(argv[1:])
    return argparse.Namespace(
        mode=os.getenv("APP_MODE", "dev"), host=DEFAULT_HOST, port=DEFAULT_PORT,
    )


args = resolve_args()
settings = get_settings(args.mode)

__all__ = ["settings", "args"]
