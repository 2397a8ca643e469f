"""
Focus Forge API application.

Run with ``uvicorn focusforge.main:app``. Every error body has the shape
``{"detail": {"code": ..., "message": ...}}``; request validation failures
are answered with 400 rather than FastAPI's default 422.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from focusforge.core.config import settings
from focusforge.core.dependencies import close_redis
from focusforge.core.logging import setup_logging
from focusforge.routers import auth, comments, notifications, projects, teams, tickets

API_VERSION = "1.0.0"

logger = logging.getLogger("focusforge")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Focus Forge API %s starting (%s)", API_VERSION, settings.ENVIRONMENT)
    try:
        yield
    finally:
        await close_redis()
        logger.info("Focus Forge API stopped")


def _error(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"code": code, "message": message, **extra}},
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    message = "Invalid request"
    if errors:
        # drop the leading "body"/"query" segment from the location
        field = ".".join(str(part) for part in errors[0].get("loc", ())[1:])
        message = errors[0].get("msg", message)
        if field:
            message = f"{field}: {message}"
    return _error(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, errors=errors)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.DEBUG:
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
            str(exc),
            type=type(exc).__name__,
        )
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR", "An unexpected error occurred"
    )


def create_app() -> FastAPI:
    docs_enabled = settings.DEBUG
    application = FastAPI(
        title="Focus Forge API",
        description="Projects, tickets, teams and invitations",
        version=API_VERSION,
        docs_url="/api/docs" if docs_enabled else None,
        redoc_url="/api/redoc" if docs_enabled else None,
        openapi_url="/api/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(RequestValidationError, handle_validation_error)
    application.add_exception_handler(Exception, handle_unexpected_error)

    application.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    for module, tag in (
        (projects, "Projects"),
        (tickets, "Tickets"),
        (comments, "Comments"),
        (teams, "Teams"),
        (notifications, "Notifications"),
    ):
        application.include_router(module.router, prefix="/api", tags=[tag])

    @application.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok", "environment": settings.ENVIRONMENT, "version": API_VERSION}

    @application.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        return {
            "message": "Focus Forge API",
            "version": API_VERSION,
            "docs": "/api/docs" if docs_enabled else "disabled",
        }

    return application


app = create_app()
