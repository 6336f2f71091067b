import logging
from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from idverify.application.api.rest.routes import router as health_router
from idverify.application.api.v1.errors import map_error
from idverify.application.api.v1.routes.identity import router as identity_router
from idverify.application.di import create_container
from idverify.config import Config, configure_logging
from idverify.domain.shared.error import DomainError, IdVerifyError
from idverify.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container
    yield
    # Closes the shared identity HTTP client
    await container.close()


def create_app(config: Config | None = None, container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application."""
    config = config or Config()

    # Configure logging early
    configure_logging(config.logging)
    logger.info("Starting %s v%s", config.server.name, config.server.version)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_httpx()
    logfire.instrument_fastapi(app_instance)

    # Setup dependency injection
    container = container or create_container(config)
    setup_dishka(container, app_instance)

    # Register routes
    app_instance.include_router(health_router)
    app_instance.include_router(identity_router)

    @app_instance.exception_handler(IdVerifyError)
    async def idverify_exception_handler(request: Request, exc: IdVerifyError):
        if not isinstance(exc, DomainError):
            logger.error(
                "Identity verification fault on %s %s: %s (%s)",
                request.method,
                request.url.path,
                exc.message,
                exc.code,
            )
        http_exc = map_error(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content={"detail": http_exc.detail},
            headers=http_exc.headers,
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In tests: configure in conftest.py
app = create_app()
