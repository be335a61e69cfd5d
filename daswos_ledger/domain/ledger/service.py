"""Ledger domain service.

Every mutating operation runs inside exactly one session/transaction opened
from the injected session factory: the wallet reads, both balance writes and
the transaction insert commit or roll back together.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from daswos_ledger.core.config import LedgerSettings

from .exceptions import (
    DuplicateReferenceError,
    InsufficientBalanceError,
    InvalidRequestError,
    LedgerError,
    StorageConflictError,
    StorageUnavailableError,
    WalletNotFoundError,
)
from .models import (
    Err,
    LedgerTransaction,
    Ok,
    SupplySnapshot,
    TransactionType,
    TransferRequest,
    TransferResult,
    WalletSnapshot,
)
from .repository import LedgerRepository
from .validation import parse_transfer_request

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available
_CONFLICT_SQLSTATES = {"40001", "40P01", "55P03"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def classify_storage_error(exc: DBAPIError) -> LedgerError:
    """Map a driver error onto the retryable/fatal storage error kinds."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _CONFLICT_SQLSTATES:
        return StorageConflictError(str(orig))
    if isinstance(exc, OperationalError) and "database is locked" in str(orig):
        return StorageConflictError(str(orig))
    return StorageUnavailableError(str(orig))


class LedgerService:
    """Executes atomic coin transfers between wallets and reads the ledger."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Optional[LedgerSettings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or LedgerSettings()

    @property
    def system_account_id(self) -> int:
        return self._settings.system_account_id

    def _repository(self, session: AsyncSession) -> LedgerRepository:
        # deferred: the SQL repository imports this package's models
        from daswos_ledger.infrastructure.database.repositories.ledger_repository import SqlLedgerRepository

        return SqlLedgerRepository(session)

    async def transfer(self, request: TransferRequest) -> TransferResult:
        """Move ``request.amount`` coins between two existing user wallets.

        The request is re-validated, so hand-built requests are rejected
        before storage exactly like raw input. The system wallet only moves
        through ``purchase_coins`` and ``give_coins``.
        """
        parsed = parse_transfer_request(
            request.from_user_id,
            request.to_user_id,
            request.amount,
            request.transaction_type,
            reference_id=request.reference_id,
            description=request.description,
        )
        if isinstance(parsed, Ok) and self.system_account_id in (request.from_user_id, request.to_user_id):
            parsed = Err(InvalidRequestError("The system wallet only changes through coin issuance"))
        if isinstance(parsed, Err):
            logger.warning("Transfer %s -> %s rejected: %s", request.from_user_id, request.to_user_id, parsed.error)
            return parsed
        return await self._execute(parsed.value, mint=False)

    async def transfer_coins(
        self,
        from_user_id: int,
        to_user_id: int,
        amount: int,
        transaction_type: TransactionType | str = TransactionType.TRANSFER,
        reference_id: Optional[str] = None,
        description: Optional[str] = "User transfer",
    ) -> TransferResult:
        parsed = parse_transfer_request(
            from_user_id,
            to_user_id,
            amount,
            transaction_type,
            reference_id=reference_id,
            description=description,
        )
        if isinstance(parsed, Err):
            logger.warning("Transfer %s -> %s rejected: %s", from_user_id, to_user_id, parsed.error)
            return parsed
        return await self.transfer(parsed.value)

    async def purchase_coins(self, user_id: int, amount: int, payment_reference: str) -> TransferResult:
        """Issue purchased coins from the system wallet, idempotent on the payment reference."""
        return await self._issue(
            user_id,
            amount,
            TransactionType.PURCHASE,
            reference_id=payment_reference,
            description="Purchase via Stripe",
        )

    async def give_coins(self, user_id: int, amount: int, reason: str = "Giveaway") -> TransferResult:
        return await self._issue(user_id, amount, TransactionType.GIVEAWAY, description=reason)

    async def _issue(
        self,
        user_id: int,
        amount: int,
        transaction_type: TransactionType,
        *,
        reference_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> TransferResult:
        parsed = parse_transfer_request(
            self.system_account_id,
            user_id,
            amount,
            transaction_type,
            reference_id=reference_id,
            description=description,
        )
        if isinstance(parsed, Err):
            return parsed
        try:
            await self.open_wallet(user_id)
        except DBAPIError as exc:
            return Err(self._storage_failure(exc, "open wallet", user_id))
        return await self._execute(parsed.value, mint=True)

    async def _execute(self, request: TransferRequest, *, mint: bool) -> TransferResult:
        try:
            async with self._session_factory() as session:
                result = await self._apply(self._repository(session), request, mint=mint)
                if isinstance(result, Ok):
                    await session.commit()
                else:
                    await session.rollback()
        except IntegrityError as exc:
            if request.reference_id is None:
                return Err(self._storage_failure(exc, "transfer", request.from_user_id))
            # lost the race on the unique reference; the winner decides the outcome
            return await self._replay(request)
        except DBAPIError as exc:
            return Err(self._storage_failure(exc, "transfer", request.from_user_id))

        if isinstance(result, Ok):
            tx = result.value
            logger.info(
                "Transaction %s committed: %s -> %s amount=%s type=%s reference=%s",
                tx.transaction_id,
                tx.from_user_id,
                tx.to_user_id,
                tx.amount,
                tx.transaction_type,
                tx.reference_id,
            )
        else:
            logger.warning(
                "Transfer %s -> %s amount=%s rejected: %s",
                request.from_user_id,
                request.to_user_id,
                request.amount,
                result.error,
            )
        return result

    async def _apply(self, repository: LedgerRepository, request: TransferRequest, *, mint: bool) -> TransferResult:
        if request.reference_id is not None:
            existing = await repository.get_by_reference(request.reference_id)
            if existing is not None:
                return self._idempotent_result(existing, request)

        wallets = await repository.lock_wallets([request.from_user_id, request.to_user_id])
        for user_id in (request.from_user_id, request.to_user_id):
            if user_id not in wallets:
                return Err(WalletNotFoundError(user_id))

        if wallets[request.from_user_id].balance < request.amount:
            return Err(InsufficientBalanceError(request.from_user_id, request.amount))

        now = _utcnow()
        if await repository.debit(request.from_user_id, request.amount, now) is None:
            return Err(InsufficientBalanceError(request.from_user_id, request.amount))
        if await repository.credit(request.to_user_id, request.amount, now) is None:
            return Err(WalletNotFoundError(request.to_user_id))
        if mint:
            await repository.add_minted(request.amount)

        return Ok(await repository.add_transaction(request, now))

    async def _replay(self, request: TransferRequest) -> TransferResult:
        try:
            async with self._session_factory() as session:
                existing = await self._repository(session).get_by_reference(request.reference_id)
        except DBAPIError as exc:
            return Err(self._storage_failure(exc, "reference lookup", request.from_user_id))
        if existing is None:
            return Err(StorageConflictError(f"Reference {request.reference_id!r} conflicted"))
        return self._idempotent_result(existing, request)

    @staticmethod
    def _idempotent_result(existing: LedgerTransaction, request: TransferRequest) -> TransferResult:
        if existing.matches(request):
            logger.info(
                "Idempotent replay of reference %s returns transaction %s",
                request.reference_id,
                existing.transaction_id,
            )
            return Ok(existing)
        return Err(DuplicateReferenceError(request.reference_id))

    @staticmethod
    def _storage_failure(exc: DBAPIError, operation: str, user_id: int) -> LedgerError:
        error = classify_storage_error(exc)
        logger.error("Storage failure during %s for user %s: %s", operation, user_id, error, exc_info=exc)
        return error

    async def list_transactions(self, user_id: int, limit: int | None = None, offset: int = 0) -> list[LedgerTransaction]:
        if limit is None:
            limit = self._settings.default_page_size
        limit = max(1, min(limit, self._settings.max_page_size))
        offset = max(0, offset)
        async with self._session_factory() as session:
            rows = await self._repository(session).list_transactions(user_id, limit, offset)
        return list(rows)

    async def get_wallet(self, user_id: int) -> WalletSnapshot | None:
        async with self._session_factory() as session:
            return await self._repository(session).get_wallet(user_id)

    async def open_wallet(self, user_id: int) -> WalletSnapshot:
        """Return the user's wallet, creating an empty one if needed."""
        wallet = await self.get_wallet(user_id)
        if wallet is not None:
            return wallet
        try:
            async with self._session_factory() as session:
                wallet = await self._repository(session).create_wallet(user_id)
                await session.commit()
        except IntegrityError:
            # created concurrently
            wallet = await self.get_wallet(user_id)
            if wallet is None:
                raise
            return wallet
        logger.info("Opened wallet for user %s", user_id)
        return wallet

    async def get_balance(self, user_id: int) -> int:
        wallet = await self.open_wallet(user_id)
        return wallet.balance

    async def get_total_supply(self) -> SupplySnapshot:
        async with self._session_factory() as session:
            supply = await self._repository(session).get_supply()
        return supply or SupplySnapshot(total=0, minted=0)

    async def bootstrap(self) -> None:
        """Create the supply row and the system wallet holding it, once."""
        async with self._session_factory() as session:
            repository = self._repository(session)
            supply = await repository.get_supply()
            if supply is None:
                supply = await repository.create_supply(self._settings.initial_supply)
                logger.info("Initialised coin supply of %s", supply.total)
            if await repository.get_wallet(self.system_account_id) is None:
                await repository.create_wallet(self.system_account_id, balance=supply.available)
                logger.info("Created system wallet %s", self.system_account_id)
            await session.commit()
