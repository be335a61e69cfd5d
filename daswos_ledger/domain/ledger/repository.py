"""Repository protocol for ledger operations."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping, Protocol, Sequence

from .models import LedgerTransaction, SupplySnapshot, TransferRequest, WalletSnapshot


class LedgerRepository(Protocol):
    async def get_wallet(self, user_id: int) -> WalletSnapshot | None:
        ...

    async def create_wallet(self, user_id: int, balance: int = 0) -> WalletSnapshot:
        ...

    async def lock_wallets(self, user_ids: Iterable[int]) -> Mapping[int, WalletSnapshot]:
        ...

    async def debit(self, user_id: int, amount: int, at: datetime) -> int | None:
        ...

    async def credit(self, user_id: int, amount: int, at: datetime) -> int | None:
        ...

    async def add_transaction(self, request: TransferRequest, at: datetime) -> LedgerTransaction:
        ...

    async def get_by_reference(self, reference_id: str) -> LedgerTransaction | None:
        ...

    async def list_transactions(self, user_id: int, limit: int, offset: int) -> Sequence[LedgerTransaction]:
        ...

    async def get_supply(self) -> SupplySnapshot | None:
        ...

    async def create_supply(self, total: int) -> SupplySnapshot:
        ...

    async def add_minted(self, amount: int) -> None:
        ...
