"""
Bounded-duration transactions.

Usage:
    with bounded_transaction(session_factory, timeout_seconds=10) as tx:
        tx.add(row)

The block commits on normal exit and rolls back on any exception. On
PostgreSQL the budget is also pushed down to the server so a stuck statement
is cancelled instead of holding locks. On every backend the elapsed time is
checked before commit; an over-budget transaction is rolled back.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from career_insights.config.profile import TRANSACTION_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class TransactionTimeoutError(Exception):
    """Raised when a transaction exceeds its time budget."""

    def __init__(self, timeout_seconds: float, elapsed_seconds: float):
        super().__init__(
            f"Transaction exceeded {timeout_seconds:.1f}s budget "
            f"(took {elapsed_seconds:.2f}s)"
        )
        self.timeout_seconds = timeout_seconds
        self.elapsed_seconds = elapsed_seconds


def _apply_server_timeout(session: Session, timeout_seconds: float) -> None:
    """Set per-transaction server-side timeouts where the dialect supports them."""
    if session.get_bind().dialect.name != "postgresql":
        return

    timeout_ms = int(timeout_seconds * 1000)
    # SET does not accept bind parameters
    session.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))
    session.execute(text(f"SET LOCAL idle_in_transaction_session_timeout = {timeout_ms}"))


@contextmanager
def bounded_transaction(
    session_factory: sessionmaker,
    timeout_seconds: Optional[float] = None,
) -> Iterator[Session]:
    """
    Run a unit of work in its own session and transaction.

    Args:
        session_factory: Factory producing new sessions
        timeout_seconds: Budget in seconds (default: PROFILE_TRANSACTION_TIMEOUT_SECONDS)

    Raises:
        TransactionTimeoutError: If the block took longer than the budget
    """
    budget = TRANSACTION_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds

    session = session_factory()
    started = time.monotonic()
    try:
        _apply_server_timeout(session, budget)
        yield session

        elapsed = time.monotonic() - started
        if elapsed > budget:
            raise TransactionTimeoutError(budget, elapsed)

        session.commit()
        logger.debug(
            "transaction.committed",
            extra={"elapsed_ms": int((time.monotonic() - started) * 1000)},
        )
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
