"""SQLAlchemy implementation for the ledger domain"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import desc, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from daswos_ledger.db.models import CoinSupply, Transaction, Wallet
from daswos_ledger.domain.ledger.models import (
    LedgerTransaction,
    SupplySnapshot,
    TransferRequest,
    WalletSnapshot,
)


class SqlLedgerRepository:
    """Ledger repository bound to one session; the caller owns commit/rollback."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_wallet(self, user_id: int) -> WalletSnapshot | None:
        stmt = select(Wallet).where(Wallet.user_id == user_id)
        result = await self.session.execute(stmt)
        wallet = result.scalars().first()
        return self._to_wallet(wallet) if wallet else None

    async def create_wallet(self, user_id: int, balance: int = 0) -> WalletSnapshot:
        wallet = Wallet(user_id=user_id, balance=balance)
        self.session.add(wallet)
        await self.session.flush()
        await self.session.refresh(wallet)
        return self._to_wallet(wallet)

    async def lock_wallets(self, user_ids: Iterable[int]) -> dict[int, WalletSnapshot]:
        # ascending order so concurrent transfers acquire row locks consistently
        stmt = (
            select(Wallet)
            .where(Wallet.user_id.in_(sorted(set(user_ids))))
            .order_by(Wallet.user_id)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return {wallet.user_id: self._to_wallet(wallet) for wallet in result.scalars().all()}

    async def debit(self, user_id: int, amount: int, at: datetime) -> int | None:
        """Subtract ``amount`` only if the balance covers it; returns the new balance."""
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id, Wallet.balance >= amount)
            .values(balance=Wallet.balance - amount, last_updated=at)
            .returning(Wallet.balance)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def credit(self, user_id: int, amount: int, at: datetime) -> int | None:
        stmt = (
            update(Wallet)
            .where(Wallet.user_id == user_id)
            .values(balance=Wallet.balance + amount, last_updated=at)
            .returning(Wallet.balance)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_transaction(self, request: TransferRequest, at: datetime) -> LedgerTransaction:
        tx = Transaction(
            from_user_id=request.from_user_id,
            to_user_id=request.to_user_id,
            amount=request.amount,
            transaction_type=request.transaction_type.value,
            timestamp=at,
            reference_id=request.reference_id,
            description=request.description,
        )
        self.session.add(tx)
        await self.session.flush()
        return self._to_transaction(tx)

    async def get_by_reference(self, reference_id: str) -> LedgerTransaction | None:
        stmt = select(Transaction).where(Transaction.reference_id == reference_id)
        result = await self.session.execute(stmt)
        tx = result.scalars().first()
        return self._to_transaction(tx) if tx else None

    async def list_transactions(self, user_id: int, limit: int, offset: int) -> Sequence[LedgerTransaction]:
        stmt = (
            select(Transaction)
            .where(or_(Transaction.from_user_id == user_id, Transaction.to_user_id == user_id))
            .order_by(desc(Transaction.timestamp), desc(Transaction.transaction_id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_transaction(row) for row in result.scalars().all()]

    async def get_supply(self) -> SupplySnapshot | None:
        stmt = select(CoinSupply).order_by(CoinSupply.id).limit(1)
        result = await self.session.execute(stmt)
        supply = result.scalars().first()
        if supply is None:
            return None
        return SupplySnapshot(total=supply.total_amount, minted=supply.minted_amount)

    async def create_supply(self, total: int) -> SupplySnapshot:
        supply = CoinSupply(total_amount=total, minted_amount=0)
        self.session.add(supply)
        await self.session.flush()
        return SupplySnapshot(total=supply.total_amount, minted=supply.minted_amount)

    async def add_minted(self, amount: int) -> None:
        stmt = (
            update(CoinSupply)
            .values(minted_amount=CoinSupply.minted_amount + amount)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    @staticmethod
    def _to_wallet(model: Wallet) -> WalletSnapshot:
        return WalletSnapshot(
            user_id=model.user_id,
            balance=model.balance,
            last_updated=model.last_updated,
        )

    @staticmethod
    def _to_transaction(model: Transaction) -> LedgerTransaction:
        return LedgerTransaction(
            transaction_id=model.transaction_id,
            from_user_id=model.from_user_id,
            to_user_id=model.to_user_id,
            amount=model.amount,
            transaction_type=model.transaction_type,
            timestamp=model.timestamp,
            reference_id=model.reference_id,
            description=model.description,
        )
