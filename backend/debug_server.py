#!/usr/bin/env python3
"""
Development server: applies migrations, then runs uvicorn with auto-reload
and SQL echo. Point DATABASE_PATH at a scratch file to keep real data safe.
"""
import os
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).parent
sys.path.insert(0, str(BACKEND_DIR))
os.chdir(BACKEND_DIR)
os.environ.setdefault("DEBUG", "true")

if __name__ == "__main__":
    import uvicorn
    from salonsuite.core.config import settings
    from scripts.init_db import init_db

    init_db()
    uvicorn.run(
        "salonsuite.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        reload_dirs=[str(BACKEND_DIR / "salonsuite")],
        log_level="debug",
    )
