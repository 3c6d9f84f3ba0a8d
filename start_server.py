#!/usr/bin/env python3
"""
Startup script for the Fleet Standard Report API.
"""

import os
import sys
import subprocess

from dotenv import load_dotenv


def main():
    """Main entry point."""
    print("=" * 60)
    print("Fleet Standard Report API Server")
    print("=" * 60)

    load_dotenv()

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    workers = int(os.getenv("WORKERS", "1"))
    standards = os.getenv("FLEET_STANDARDS_PATH") or "bundled fleet standards"
    auth = bool(os.getenv("FLEET_AUTH_USERS") and os.getenv("FLEET_AUTH_PASSWORD"))

    print(f"\nConfiguration:")
    print(f"  Host: {host}")
    print(f"  Port: {port}")
    print(f"  Workers: {workers}")
    print(f"  Standards: {standards}")
    print(f"  Basic Auth: {'Yes' if auth else 'No'}")

    print(f"\nAPI Documentation: http://localhost:{port}/docs")
    print("=" * 60)

    cmd = [
        sys.executable, "-m", "uvicorn",
        "app:app",
        "--host", host,
        "--port", str(port),
    ]

    if workers == 1:
        cmd.append("--reload")
    else:
        cmd.extend(["--workers", str(workers)])

    try:
        subprocess.run(cmd)
    except KeyboardInterrupt:
        print("\n\nShutting down server...")
        sys.exit(0)


if __name__ == "__main__":
    main()
