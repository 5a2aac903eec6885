"""
Transaction helpers for code that runs outside a request's get_db session
(scripts) or that wants a soft failure on commit.
"""
from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from salonsuite.core.database import SessionLocal
from salonsuite.core.logging_config import get_logger

logger = get_logger("db_transaction")


@contextmanager
def db_transaction(db: Optional[Session] = None) -> Iterator[Session]:
    """Commit on clean exit, roll back and re-raise on error. Owns (and closes) the session it creates."""
    owns_session = db is None
    if owns_session:
        db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {str(e)}", exc_info=True)
        raise
    finally:
        if owns_session:
            db.close()


def safe_commit(db: Session, operation_name: str = "operation") -> bool:
    """Commit; on a database error roll back, log and return False."""
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{operation_name} failed: {str(e)}", exc_info=True, extra={"operation": operation_name})
        return False
