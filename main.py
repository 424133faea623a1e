#!/usr/bin/env python3
"""
Character API -- user accounts and a character CRUD service behind bearer tokens.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --port 8080
  python main.py --reload
  python main.py --log-level debug

Environment variables (see core/config.py for the full list):
  SECRET_KEY    JWT signing key, at least 32 characters. Required unless DEBUG=true.
  DEBUG         true to auto-generate a throwaway SECRET_KEY for local development.
  HOST, PORT    Defaults for --host / --port (127.0.0.1:3000).
"""

import argparse

import uvicorn

from core.config import get_settings


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="charapi",
        description="Run the Character API server.",
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listen port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart the server when source files change")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (default: info)",
    )
    return parser


def main() -> None:
    args = _build_parser().parse_args()
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
