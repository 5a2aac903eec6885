import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from salonsuite.core.config import settings
from salonsuite.core.logging_config import get_logger

logger = get_logger("database")


def _ensure_writable(db_file: str) -> None:
    """Create the parent directory and fail fast if SQLite could not write there."""
    parent = os.path.dirname(db_file)
    if parent:
        os.makedirs(parent, exist_ok=True)
        if not os.access(parent, os.W_OK):
            raise PermissionError(f"Database directory is not writable: {parent}")
    if os.path.exists(db_file) and not os.access(db_file, os.W_OK):
        raise PermissionError(f"Database file is not writable: {db_file}")


_ensure_writable(settings.DATABASE_URL.replace("sqlite:///", ""))

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 20.0},
    pool_pre_ping=True,
    echo=settings.DEBUG,
)


@event.listens_for(engine, "connect")
def _sqlite_pragmas(dbapi_connection, connection_record):
    # Checkout writes several tables per request; WAL keeps report reads from blocking them
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Request-scoped session: commit on success, roll back everything on error."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.debug("Rolled back request session")
        raise
    finally:
        db.close()
