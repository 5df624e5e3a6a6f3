"""Database engine, session and transaction helpers."""

from career_insights.database.session import (
    get_db_session_factory,
    get_engine,
    get_session_factory,
)
from career_insights.database.transaction import (
    TransactionTimeoutError,
    bounded_transaction,
)

__all__ = [
    "get_db_session_factory",
    "get_engine",
    "get_session_factory",
    "TransactionTimeoutError",
    "bounded_transaction",
]
