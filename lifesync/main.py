"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from lifesync.api.v1 import files, habits, local, messages, tasks, transactions
from lifesync.application.local_seed import seed_demo_data
from lifesync.application.local_store import LocalDataStore
from lifesync.config import get_settings
from lifesync.domain.errors import NotFoundError, StorageError, StoreError, ValidationError
from lifesync.infrastructure.db.session import check_db_connection
from lifesync.infrastructure.preferences import CurrentUserPreference
from lifesync.infrastructure.storage import BlobStorage, build_storage

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Catches everything the exception handlers did not map and logs the traceback"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            tb_str = traceback.format_exc()
            logger.error("\n%s\nERROR on %s %s\n%s%s", "=" * 60, request.method, request.url.path, tb_str, "=" * 60)
            return Response(content=f"Internal Server Error: {exc}", status_code=500)


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        if status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


def create_app(
    local_store: LocalDataStore | None = None,
    storage: BlobStorage | None = None,
    preferences: CurrentUserPreference | None = None,
) -> FastAPI:
    """
    Application factory - builds the FastAPI app and its stores

    Args:
        local_store: session store to serve; a seeded demo store when omitted
        storage: blob storage for files; built from settings when omitted
        preferences: current-user snapshot of the session store; read from
            settings.PREFERENCES_PATH when omitted

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="LifeSync",
        debug=settings.DEBUG,
    )

    app.state.local_store = local_store if local_store is not None else seed_demo_data(LocalDataStore())
    app.state.storage = storage if storage is not None else build_storage(settings)
    app.state.preferences = (
        preferences if preferences is not None else CurrentUserPreference(settings.PREFERENCES_PATH)
    )

    app.add_middleware(ErrorLoggingMiddleware)

    app.add_exception_handler(ValidationError, _error_handler(422))
    app.add_exception_handler(NotFoundError, _error_handler(404))
    app.add_exception_handler(StoreError, _error_handler(503))
    app.add_exception_handler(StorageError, _error_handler(502))

    app.include_router(tasks.router)
    app.include_router(habits.router)
    app.include_router(transactions.router)
    app.include_router(messages.router)
    app.include_router(files.router)
    app.include_router(local.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (checks the database)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "lifesync.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
