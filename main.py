#!/usr/bin/env python3
"""
People API -- JSON CRUD over people with cookie-based sessions.

Usage:
  python main.py
  python main.py --port 9000
  python main.py --host 0.0.0.0 --reload

Environment variables (also read from .env):
  DATABASE_URL   SQLAlchemy connection string. Default: sqlite:///./people.db
  SECRET_KEY     Session signing secret, at least 32 chars. Required unless DEBUG=true.
  PORT           Listening port. Default: 8000
  AUTH_ENABLED   false serves /people without login. Default: true
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the People API server.")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listening port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
