"""Transaction utilities for explicit transaction boundaries.

Every ledger, roster and report operation runs inside ``transaction()`` so a
failure at any step leaves no partial rows behind, and store failures reach
the caller as typed ``StoreError``s.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from core.errors import AngkotError, ErrorCode, StoreError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(session: Session, writing: bool = True) -> Iterator[Session]:
    """Context manager for explicit transaction boundaries.

    Commits on successful completion, rolls back on any exception.

    Example:
        with database.session() as session, transaction(session):
            legs.create(LegKind.DEPARTURE, driver_id, today)
            legs.add_item(...)
        # Automatic commit if no exception, rollback otherwise

    Args:
        session: SQLAlchemy session to manage
        writing: selects the generic failure code for unexpected store errors

    Raises:
        AngkotError subclasses unchanged; SQLAlchemy errors as StoreError
    """
    try:
        yield session
        session.commit()
    except AngkotError:
        session.rollback()
        raise
    except (OperationalError, PoolTimeoutError) as e:
        session.rollback()
        logger.warning("Store unavailable: %s", e)
        raise StoreError(f"Store unavailable: {e}", code=ErrorCode.STORE_UNAVAILABLE) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Store operation failed")
        code = ErrorCode.STORE_WRITE_FAILED if writing else ErrorCode.STORE_READ_FAILED
        raise StoreError(f"Store operation failed: {e}", code=code) from e
    except Exception:
        session.rollback()
        raise


def bound_lock_wait(session: Session, timeout_ms: int) -> None:
    """Limit how long this transaction waits for row locks.

    Only PostgreSQL needs this; SQLite bounds waits with the connection's
    busy timeout.
    """
    if session.get_bind().dialect.name == "postgresql":
        session.execute(text(f"SET LOCAL lock_timeout = {int(timeout_ms)}"))
