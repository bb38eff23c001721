"""FastAPI application for the ODF document catalog."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import Environment, Settings
from ..domain.errors import (
    BadRequestError,
    ContentParseError,
    DocumentNotFoundError,
    OdfMonitorError,
    UpstreamUnavailableError,
)
from ..domain.services import OdfDocumentService
from .routers import documents_router
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)

ERROR_STATUS: list[tuple[type[OdfMonitorError], int, str]] = [
    (DocumentNotFoundError, 404, "Not Found"),
    (BadRequestError, 400, "Bad Request"),
    (ContentParseError, 400, "Bad Request"),
    (UpstreamUnavailableError, 502, "Bad Gateway"),
]


def error_status(error: OdfMonitorError) -> tuple[int, str]:
    for error_type, status, reason in ERROR_STATUS:
        if isinstance(error, error_type):
            return status, reason
    return 500, "Internal Server Error"


async def handle_domain_error(request: Request, exc: OdfMonitorError) -> JSONResponse:
    status, reason = error_status(exc)
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status}: {exc}")
    body = ErrorResponse(status_code=status, error=reason, message=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump(by_alias=True))


def create_app(settings: Settings, service: OdfDocumentService | None = None) -> FastAPI:
    """Create the API app.

    When no service is given one is wired from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if service is None:
            from ..factory import create_document_service

            app.state.service = create_document_service(settings)
        else:
            app.state.service = service
        logger.info(f"Environment: {settings.api.environment.value}")
        logger.info(f"API prefix: /{settings.api.global_prefix}")
        yield
        logger.info("ODF monitor API shut down.")

    is_development = settings.api.environment is Environment.DEVELOPMENT
    app = FastAPI(
        title="ODF Monitor API",
        description="Monitoring and inspection of ODF result documents",
        version="1.0",
        lifespan=lifespan,
        docs_url="/docs" if is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if is_development else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.api.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(OdfMonitorError, handle_domain_error)

    prefix = f"/{settings.api.global_prefix}" if settings.api.global_prefix else ""
    app.include_router(documents_router, prefix=prefix)

    # Available before startup for callers that skip the lifespan
    if service is not None:
        app.state.service = service
    return app
