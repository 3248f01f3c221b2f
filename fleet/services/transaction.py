# fleet/services/transaction.py
"""
Unit-of-work boundary for service writes.
Everything inside the block is committed once on success and rolled back on
any exception, so no caller ever observes a half-applied write.
"""

from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fleet.exceptions import ConflictError, InternalError
from fleet.utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def unit_of_work(db: Session, action: str):
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"[{action}] integrity violation: {e.orig}")
        raise ConflictError(f"Conflicting data for {action}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[{action}] storage failure: {e}", exc_info=True)
        raise InternalError(f"Storage failure during {action}") from e
    except Exception:
        db.rollback()
        raise
