"""Shared fixtures: a fresh file-backed SQLite ledger per test."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from daswos_ledger.core.config import DatabaseSettings, LedgerSettings, Settings
from daswos_ledger.db.models import Transaction, Wallet
from daswos_ledger.domain.ledger import LedgerService
from daswos_ledger.infrastructure.database import build_engine, build_session_factory, init_db
from daswos_ledger.infrastructure.database.repositories import SqlLedgerRepository

INITIAL_SUPPLY = 1_000_000
SYSTEM_ACCOUNT = 0


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}"),
        ledger=LedgerSettings(system_account_id=SYSTEM_ACCOUNT, initial_supply=INITIAL_SUPPLY),
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = build_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def ledger(session_factory, settings: Settings) -> LedgerService:
    service = LedgerService(session_factory, settings.ledger)
    await service.bootstrap()
    return service


@pytest.fixture
def make_wallet(session_factory) -> Callable[[int, int], Awaitable[None]]:
    """Insert a wallet with an arbitrary starting balance, bypassing the ledger."""

    async def _make(user_id: int, balance: int = 0) -> None:
        async with session_factory() as session:
            await SqlLedgerRepository(session).create_wallet(user_id, balance=balance)
            await session.commit()

    return _make


@pytest.fixture
def balance_of(session_factory) -> Callable[[int], Awaitable[int]]:
    async def _balance(user_id: int) -> int:
        async with session_factory() as session:
            result = await session.execute(select(Wallet.balance).where(Wallet.user_id == user_id))
            return result.scalar_one()

    return _balance


@pytest.fixture
def transaction_count(session_factory) -> Callable[[], Awaitable[int]]:
    async def _count() -> int:
        async with session_factory() as session:
            result = await session.execute(select(func.count()).select_from(Transaction))
            return result.scalar_one()

    return _count


@pytest.fixture
def total_balance(session_factory) -> Callable[[], Awaitable[int]]:
    async def _total() -> int:
        async with session_factory() as session:
            result = await session.execute(select(func.coalesce(func.sum(Wallet.balance), 0)))
            return result.scalar_one()

    return _total
