"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error handlers and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import OpenAIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from relaychat.agent.upstream import (
    UpstreamError,
    UpstreamNotInitializedError,
    get_upstream_service,
)
from relaychat.api.chat import router as chat_router
from relaychat.api.transcribe import router as transcribe_router
from relaychat.models.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_body(message: str) -> dict[str, str]:
    return ErrorResponse(error=message).model_dump()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Tries to build the upstream client up front so a missing key shows in
    the startup log. The server still starts; routes fail fast until the
    key is set.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting chat relay API...")
    try:
        get_upstream_service()
    except UpstreamNotInitializedError as e:
        logger.error(f"Failed to initialize upstream client: {e}")
    yield
    # Shutdown
    logger.info("Shutting down chat relay API...")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def upstream_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Upstream failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(str(exc) or "Upstream request failed"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Error caught by global handler on {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(str(exc) or "An unexpected error occurred"),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chat Relay API",
        description=(
            "Minimal relay between the browser chat client and an upstream "
            "language-model provider. Forwards chat context for blocking or "
            "streamed completions and forwards recorded audio for transcription."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(UpstreamError, upstream_exception_handler)
    application.add_exception_handler(OpenAIError, upstream_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    application.include_router(chat_router)
    application.include_router(transcribe_router)

    @application.get("/")
    async def root() -> dict[str, str]:
        """Liveness probe used by the chat client."""
        return {"status": "oks"}

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chat-relay"}

    return application


app = create_app()
