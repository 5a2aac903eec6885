import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from salonsuite.core.config import settings

ROOT_LOGGER = "salonsuite"
LOG_FILE = "salonsuite.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# SALONSUITE_LOG_DIR overrides ./logs (tests point it at a temp dir)
LOG_DIR = Path(os.environ.get("SALONSUITE_LOG_DIR") or "logs")


def configure_logging() -> logging.Logger:
    """Attach console and rotating-file handlers to the salonsuite logger once."""
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    level = logging.DEBUG if settings.DEBUG else logging.INFO
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_DIR / LOG_FILE,
            maxBytes=2 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError as e:
        root.warning(f"File logging disabled, cannot write to {LOG_DIR}: {e}")
    else:
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    return root


configure_logging()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
