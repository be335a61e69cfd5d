import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError

from daswos_ledger import __version__
from daswos_ledger.core.config import Settings, get_settings
from daswos_ledger.core.container import ApplicationContainer
from daswos_ledger.core.logging import configure_logging
from daswos_ledger.domain.ledger.service import classify_storage_error
from daswos_ledger.infrastructure.database.session import init_db
from daswos_ledger.interfaces.http import create_api_router

logger = logging.getLogger(__name__)


def create_app(container: Optional[ApplicationContainer] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = container.settings if container else (settings or get_settings())
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = container is None
        app.state.container = container or ApplicationContainer.from_settings(settings)
        if settings.environment in ("development", "test"):
            await init_db(app.state.container.engine)
        await app.state.container.ledger.bootstrap()
        yield
        if owned:
            await app.state.container.dispose()

    app = FastAPI(
        title=settings.project_name,
        description="DasWos coin wallets and ledger",
        version=__version__,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    @app.exception_handler(DBAPIError)
    async def storage_error_handler(request: Request, exc: DBAPIError) -> JSONResponse:
        error = classify_storage_error(exc)
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, error)
        return JSONResponse(
            status_code=409 if error.retryable else 503,
            content={"detail": {"code": error.code, "message": str(error), "retryable": error.retryable}},
        )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app
