#!/usr/bin/env python3
"""
Production entry point: brings the SQLite schema up to date, then serves
salonsuite.main:app with uvicorn (no reload). See debug_server.py for development.
"""
import os
import socket
import sys
import time
import traceback
from pathlib import Path

BACKEND_DIR = Path(__file__).parent
sys.path.insert(0, str(BACKEND_DIR))
os.chdir(BACKEND_DIR)

PORT_RETRIES = 3
PORT_RETRY_DELAY = 3


def port_is_free(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def wait_for_port(host: str, port: int) -> bool:
    """Give a previous instance a few seconds to release the port."""
    for attempt in range(1, PORT_RETRIES + 1):
        if port_is_free(host, port):
            return True
        print(f"Port {port} busy, retry {attempt}/{PORT_RETRIES} in {PORT_RETRY_DELAY}s", file=sys.stderr)
        time.sleep(PORT_RETRY_DELAY)
    return port_is_free(host, port)


def apply_migrations() -> None:
    # A failed upgrade is reported but does not stop the API; /health still answers
    from scripts.init_db import init_db
    try:
        init_db()
    except Exception as e:
        print(f"Warning: alembic upgrade failed: {e}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)


def main() -> int:
    import uvicorn
    from salonsuite.core.config import settings

    if not wait_for_port(settings.HOST, settings.PORT):
        print(f"ERROR: {settings.HOST}:{settings.PORT} is still taken; is SalonSuite already running?", file=sys.stderr)
        return 1

    apply_migrations()

    try:
        from salonsuite.main import app  # noqa: F401
    except Exception as e:
        print(f"ERROR: could not import salonsuite.main: {e}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return 1

    print(f"Serving SalonSuite API on http://{settings.HOST}:{settings.PORT}")
    try:
        uvicorn.run(
            "salonsuite.main:app",
            host=settings.HOST,
            port=settings.PORT,
            log_level="info",
            access_log=True,
            reload=False,
        )
    except KeyboardInterrupt:
        print("\nServer stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
