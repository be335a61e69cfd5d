"""Reusable FastAPI dependencies."""

from fastapi import Request

from daswos_ledger.core.container import ApplicationContainer
from daswos_ledger.domain.ledger import LedgerService


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_ledger_service(request: Request) -> LedgerService:
    return get_container(request).ledger


__all__ = [
    "get_container",
    "get_ledger_service",
]
