"""Domain models for ledger operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from .exceptions import LedgerError

T = TypeVar("T")


class TransactionType(str, Enum):
    PURCHASE = "purchase"
    GIVEAWAY = "giveaway"
    TRANSFER = "transfer"


@dataclass(slots=True, frozen=True)
class TransferRequest:
    from_user_id: int
    to_user_id: int
    amount: int
    transaction_type: TransactionType
    reference_id: Optional[str] = None
    description: Optional[str] = None


@dataclass(slots=True)
class WalletSnapshot:
    user_id: int
    balance: int
    last_updated: Optional[datetime]


@dataclass(slots=True)
class LedgerTransaction:
    transaction_id: int
    from_user_id: int
    to_user_id: int
    amount: int
    transaction_type: str
    timestamp: datetime
    reference_id: Optional[str]
    description: Optional[str]

    def matches(self, request: TransferRequest) -> bool:
        """True when ``request`` would have produced this same entry."""
        return (
            self.from_user_id == request.from_user_id
            and self.to_user_id == request.to_user_id
            and self.amount == request.amount
            and self.transaction_type == request.transaction_type.value
        )


@dataclass(slots=True)
class SupplySnapshot:
    total: int
    minted: int

    @property
    def available(self) -> int:
        return self.total - self.minted


@dataclass(slots=True, frozen=True)
class Ok(Generic[T]):
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True, frozen=True)
class Err:
    error: LedgerError

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err]
TransferResult = Union[Ok[LedgerTransaction], Err]
