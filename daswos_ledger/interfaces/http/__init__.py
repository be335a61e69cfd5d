from fastapi import APIRouter

from daswos_ledger.interfaces.http.routers import coins


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(coins.router, prefix="/coins", tags=["coins"])
    return router


__all__ = [
    "create_api_router",
]
