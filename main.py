#!/usr/bin/env python3
"""
Use Case Library — launch the API and web pages.

Usage:
    python main.py                          # http://localhost:3001
    python main.py --port 9000              # http://localhost:9000
    python main.py --host 0.0.0.0           # bind to all interfaces
    python main.py --db /path/to/use_cases.sqlite
    python main.py --reload                 # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import sys
import webbrowser
from pathlib import Path


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the Use Case Library API and web interface.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "3001")),
        help="Port to listen on (default: 3001 or APP_PORT env var)",
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="Path to SQLite database (default: use_cases.sqlite or APP_DB_PATH env var)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    args = parser.parse_args()

    # Set DB path env var if provided via CLI; api.app reads it on import
    if args.db is not None:
        os.environ["APP_DB_PATH"] = str(args.db)

    db_path = Path(os.getenv("APP_DB_PATH", "use_cases.sqlite"))
    if not db_path.exists():
        print(f"Note: {db_path} does not exist yet; an empty library will be created.")
        print("  Run 'python import_use_cases.py' to load Use_Case_Library.csv.")
        print()

    if not os.getenv("APP_API_KEY"):
        print("Warning: APP_API_KEY is not set; creating use cases is unauthenticated")
        print("  in development and disabled when APP_ENV=production.")
        print()

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Use Case Library at {url}")
    print(f"Database: {db_path}")
    print()

    if not args.no_browser:
        # Open browser after a short delay to let the server start
        import threading
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
