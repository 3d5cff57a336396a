#!/usr/bin/env python3
"""
Startup script for the Tag Tree HTTP Server.

Usage:
    tagtree-http [--root ROOT] [--port PORT] [--host HOST] [--grammar tag|arrow]

Environment variables:
    TAGTREE_ROOT: Workspace root to scan and watch (default: current directory)
    TAGTREE_HTTP_PORT: Server port (default: 8766)
    TAGTREE_HTTP_HOST: Server host (default: 127.0.0.1)
    TAGTREE_GRAMMAR: Annotation grammar, tag or arrow (default: tag)
    TAGTREE_LOG_LEVEL: Logging level (default: INFO)
    TAGTREE_WATCH: Watch the root for changes (default: true)
"""

import argparse
import os
import sys
from pathlib import Path

from .config import DEFAULT_HTTP_HOST, DEFAULT_HTTP_PORT
from .core.constants import GRAMMARS


def main():
    """Start the HTTP server."""
    parser = argparse.ArgumentParser(description="Tag Tree HTTP Server")
    parser.add_argument("--root", default=None, help="Workspace root (default: current directory)")
    parser.add_argument("--port", type=int, default=None, help=f"Server port (default: {DEFAULT_HTTP_PORT})")
    parser.add_argument("--host", default=None, help=f"Server host (default: {DEFAULT_HTTP_HOST})")
    parser.add_argument("--grammar", choices=GRAMMARS, default=None, help="Annotation grammar (default: tag)")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    parser.add_argument("--no-watch", action="store_true", help="Do not watch the root for changes")

    args = parser.parse_args()

    # Set environment variables from args if provided
    if args.root:
        os.environ["TAGTREE_ROOT"] = str(Path(args.root).resolve())
    if args.port:
        os.environ["TAGTREE_HTTP_PORT"] = str(args.port)
    if args.host:
        os.environ["TAGTREE_HTTP_HOST"] = args.host
    if args.grammar:
        os.environ["TAGTREE_GRAMMAR"] = args.grammar
    if args.log_level:
        os.environ["TAGTREE_LOG_LEVEL"] = args.log_level.upper()
    if args.no_watch:
        os.environ["TAGTREE_WATCH"] = "false"

    # Get final config
    port = int(os.getenv("TAGTREE_HTTP_PORT", str(DEFAULT_HTTP_PORT)))
    host = os.getenv("TAGTREE_HTTP_HOST", DEFAULT_HTTP_HOST)
    log_level = os.getenv("TAGTREE_LOG_LEVEL", "INFO").lower()

    print(f"Starting Tag Tree HTTP Server on {host}:{port}", file=sys.stderr)
    print(f"Log level: {log_level.upper()}", file=sys.stderr)

    try:
        import uvicorn
        from .web.app import app

        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level=log_level,
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user", file=sys.stderr)
    except Exception as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
