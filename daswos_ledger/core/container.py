"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from daswos_ledger.core.config import Settings, get_settings
from daswos_ledger.domain.ledger import LedgerService
from daswos_ledger.infrastructure.database.session import build_engine, build_session_factory


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    ledger: LedgerService = field(init=False)

    def __post_init__(self) -> None:
        self.ledger = LedgerService(self.session_factory, self.settings.ledger)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ApplicationContainer":
        settings = settings or get_settings()
        engine = build_engine(settings)
        return cls(settings=settings, engine=engine, session_factory=build_session_factory(engine))

    async def dispose(self) -> None:
        await self.engine.dispose()


__all__ = ["ApplicationContainer"]
