"""
SchoolMeals FastAPI application.

Wires settings, logging, middleware, error handlers and the routers of the
catalog, school pricing, meal plan and schedule editing APIs.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio

from api.routes import health, meals, pricing, plans, schedule
from domain import models as db_models
from app.config import settings

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    service_exception_handler,
    general_exception_handler,
)
from app.exceptions import ServiceError

logging.basicConfig(level=settings.log_level, format=settings.log_format)
_logger = logging.getLogger("schoolmeals.main")


async def _create_schema() -> None:
    """Create tables, retrying while the database container comes up."""
    attempts = settings.db_init_attempts
    for attempt in range(1, attempts + 1):
        try:
            # create_all blocks, keep it off the event loop
            await anyio.to_thread.run_sync(db_models.init_database)
        except Exception as exc:
            if attempt == attempts:
                _logger.error("Giving up on database schema after %d attempts", attempt)
                raise
            _logger.warning(
                "Schema creation attempt %d/%d failed (%s); retrying in %.1fs",
                attempt,
                attempts,
                exc,
                settings.db_init_delay_sec,
            )
            await anyio.sleep(settings.db_init_delay_sec)
        else:
            _logger.info("Database schema ready")
            return


@asynccontextmanager
async def lifespan(app: FastAPI):
    _logger.info(
        "Starting %s %s (%s)", settings.app_name, settings.app_version, settings.environment.value
    )
    await _create_schema()
    try:
        yield
    finally:
        _logger.info("Shutting down %s", settings.app_name)
        db_models.engine.dispose()


app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=f"{settings.api_prefix}/openapi.json" if settings.docs_enabled else None,
    docs_url=f"{settings.api_prefix}/docs" if settings.docs_enabled else None,
    redoc_url=f"{settings.api_prefix}/redoc" if settings.docs_enabled else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

for exc_class, handler in (
    (RequestValidationError, validation_exception_handler),
    (StarletteHTTPException, http_exception_handler),
    (ServiceError, service_exception_handler),
    (Exception, general_exception_handler),
):
    app.add_exception_handler(exc_class, handler)

for module in (health, meals, pricing, plans, schedule):
    app.include_router(module.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
