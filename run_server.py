#!/usr/bin/env python3
"""
Serve the artifact search API with uvicorn.

Host and port default to SERVER_HOST / SERVER_PORT; the uvicorn log level
follows LOG_LEVEL so access logs match the application logs.
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Artifact Search API server")
    parser.add_argument("--host", default=os.getenv("SERVER_HOST", "127.0.0.1"), help="Interface to bind")
    parser.add_argument("--port", type=int, default=int(os.getenv("SERVER_PORT", "8000")), help="Port to bind")
    parser.add_argument("--reload", action="store_true", help="Reload on source changes (development)")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
