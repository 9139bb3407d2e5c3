import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from shopease.exceptions import DeadlineExceeded, ShopEaseError, StorageUnavailable

logger = logging.getLogger(__name__)

# Connection loss, server shutdown, lock/statement timeouts and pool exhaustion
STORAGE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


class BaseService:
    """
    Shared transaction handling for the data access services.

    Every write runs inside `unit_of_work()`: one transaction that either
    commits as a whole or is rolled back, whatever interrupts it. Reads run
    inside `reading()` so storage failures surface as `StorageUnavailable`.

    Deadlines are `time.monotonic()` timestamps supplied by the caller.

    Sessions must be built with `expire_on_commit=False` so returned rows
    stay readable without another round trip after the transaction ends.
    """

    clock = staticmethod(time.monotonic)

    def __init__(self, db: Session):
        self.db = db

    def _check_deadline(self, deadline: Optional[float]) -> None:
        if deadline is not None and self.clock() >= deadline:
            raise DeadlineExceeded()

    def _apply_statement_timeout(self, deadline: Optional[float]) -> None:
        """Let PostgreSQL cancel statements that would outlive the deadline."""
        if deadline is None or self.db.get_bind().dialect.name != "postgresql":
            return
        remaining_ms = max(int((deadline - self.clock()) * 1000), 1)
        self.db.execute(text(f"SET LOCAL statement_timeout = {remaining_ms}"))

    @contextmanager
    def reading(self, deadline: Optional[float] = None) -> Iterator[Session]:
        """
        Run read-only queries in a short transaction.

        The transaction ends when the block exits so it never holds locks
        (or a snapshot) for the rest of the session.
        """
        self._check_deadline(deadline)
        try:
            self._apply_statement_timeout(deadline)
            yield self.db
            self.db.commit()
        except STORAGE_ERRORS as e:
            self.db.rollback()
            logger.error(f"Storage error during read: {e}")
            raise StorageUnavailable() from e
        except BaseException:
            self.db.rollback()
            raise

    @contextmanager
    def unit_of_work(self, deadline: Optional[float] = None) -> Iterator[Session]:
        """
        Run writes in one transaction that commits only if the block succeeds.

        Anything the caller needs from the database (generated keys, server
        defaults) must be loaded inside the block: once `commit()` returns the
        change is durable, and no error raised after that point may suggest
        otherwise.
        """
        self._check_deadline(deadline)
        try:
            self._apply_statement_timeout(deadline)
            yield self.db
            self._check_deadline(deadline)
            self.db.commit()
        except ShopEaseError:
            self.db.rollback()
            raise
        except STORAGE_ERRORS as e:
            self.db.rollback()
            logger.error(f"Storage error, transaction rolled back: {e}")
            raise StorageUnavailable() from e
        except BaseException:
            self.db.rollback()
            raise
