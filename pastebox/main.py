"""
Pastebox - Main FastAPI application.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pastebox.config import settings
from pastebox.database import PasteStore, connect_store
from pastebox.errors import NotFoundError, StorageError, ValidationError
from pastebox.routes import health, pastes

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request body schema failures as 400s."""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def _validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Report rejected paste input as 400s."""
    return JSONResponse(status_code=400, content={"detail": exc.details})


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Report unknown, expired and exhausted pastes alike as 404s."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _storage_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Log backend failures and answer with a generic 500."""
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(store: Optional[PasteStore] = None, test_mode: Optional[bool] = None) -> FastAPI:
    """
    Build the application.

    Args:
        store: Paste store to use; connects to REDIS_URL on startup when omitted
        test_mode: Honour the x-test-now-ms header (defaults to TEST_MODE)
    """
    app = FastAPI(
        title="Pastebox",
        description="Share text with optional expiry by time or view count",
        version="1.0.0",
    )
    app.state.store = store
    app.state.test_mode = settings.TEST_MODE if test_mode is None else test_mode

    # Add CORS middleware (optional, for cross-origin requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ValidationError, _validation_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(StorageError, _storage_handler)

    # Include route modules
    app.include_router(health.router)
    app.include_router(pastes.router)

    @app.on_event("startup")
    async def startup_event():
        """Startup event handler."""
        logger.info("Pastebox application starting...")

        if app.state.store is None:
            app.state.store = connect_store(settings.REDIS_URL)

        if app.state.store.using_fallback:
            logger.warning("STORAGE: Using IN-MEMORY backend (Redis not available)")
            logger.warning("   Data will NOT persist across server restarts!")
        if app.state.test_mode:
            logger.warning("TEST_MODE is on: x-test-now-ms overrides the clock")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Shutdown event handler."""
        logger.info("Pastebox application shutting down...")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pastebox.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
