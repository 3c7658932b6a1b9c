#!/usr/bin/env python3
"""
Startup script for the Vite & Gourmand API.

Usage:
    # Run on the default port
    python run_server.py

    # Seed the demo catalog and customer first
    python run_server.py --seed

    # Run with custom port and reload for development
    python run_server.py --port 8001 --reload
"""

import argparse
import os


def main():
    parser = argparse.ArgumentParser(
        description="Run the Vite & Gourmand API"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=int(os.getenv("PORT", "8000")),
        help="Port to run on (default: 8000 or $PORT)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed the demo catalog and print a demo bearer token before starting",
    )

    args = parser.parse_args()

    if args.seed:
        from vite_gourmand.seed_menu import main as seed_main
        seed_main()

    import uvicorn

    print(f"\n{'=' * 50}")
    print("Starting: Vite & Gourmand API")
    print(f"Port:     {args.port}")
    print(f"{'=' * 50}\n")

    uvicorn.run(
        "vite_gourmand.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
