"""SQLAlchemy-backed repository implementations."""

from .ledger_repository import SqlLedgerRepository

__all__ = [
    "SqlLedgerRepository",
]
