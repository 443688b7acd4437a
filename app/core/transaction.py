from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import AppError, WriteError
from app.core.logging_config import logger


@contextmanager
def transaction(db: Session, failure_message: str):
    """
    Run a block of writes as one transaction.

    Commits when the block finishes. On any error the transaction is
    rolled back; domain faults are re-raised unchanged, database errors
    are logged and re-raised as ``WriteError(failure_message)``.
    """
    try:
        yield db
        db.commit()
    except AppError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{failure_message}: {type(e).__name__}: {str(e)}")
        raise WriteError(failure_message) from e
    except Exception:
        db.rollback()
        raise
