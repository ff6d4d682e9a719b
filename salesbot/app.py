"""
FastAPI application instance with lifespan management.

This module creates the FastAPI application with proper configuration,
middleware, and lifespan management for logging and the channel and
assistant components.
"""

from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from salesbot.controller.assistant import router as assistant_router
from salesbot.controller.channel import router as channel_router
from salesbot.controller.whatsapp import router as whatsapp_router
from salesbot.exceptions.handler import register_exception_handlers
from salesbot.lifespan import lifespan
from salesbot.middleware import ContextMiddleware, LoggingMiddleware, RequestIDMiddleware
from salesbot.models.errors import HTTPException
from salesbot.settings import Settings, get_settings


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the process-wide instance
        http_client: Outbound HTTP client to share instead of creating one

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,  # Attach lifespan context manager
        responses={
            500: {"model": HTTPException, "description": "Internal Server Error"},
            404: {"model": HTTPException, "description": "Resource Not Found"},
            409: {"model": HTTPException, "description": "Conflict"},
            422: {"model": HTTPException, "description": "Unprocessable Entity"},
            502: {"model": HTTPException, "description": "Bad Gateway"},
        },
    )
    app.state.settings = settings
    app.state.http_client = http_client

    register_exception_handlers(app)
    # Configure CORS middleware
    if settings.SERVER.CORS_ENABLED:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.SERVER.CORS_ORIGINS,
            allow_credentials=settings.SERVER.CORS_ALLOW_CREDENTIALS,
            allow_methods=settings.SERVER.CORS_ALLOW_METHODS,
            allow_headers=settings.SERVER.CORS_ALLOW_HEADERS,
        )
    app.add_middleware(
        LoggingMiddleware,
        slow_request_threshold_ms=settings.SERVER.SLOW_REQUEST_THRESHOLD_MS,
    )
    app.add_middleware(ContextMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(channel_router, prefix="/api/v1")
    app.include_router(assistant_router, prefix="/api/v1")
    app.include_router(whatsapp_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """Root endpoint for health check."""
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/scaler", include_in_schema=False)
    async def custom_swagger_ui():
        """API reference page."""
        return HTMLResponse(content=_API_REFERENCE_TEMPLATE, status_code=200)

    return app


_API_REFERENCE_TEMPLATE = """
<!doctype html>
<html>
  <head>
    <title>SalesBot API Reference</title>
    <meta charset="utf-8" />
    <meta
      name="viewport"
      content="width=device-width, initial-scale=1" />
  </head>
  <body>
    <script
      id="api-reference"
      data-url="/openapi.json"></script>
    <script src="https://cdn.jsdelivr.net/npm/@scalar/api-reference"></script>
  </body>
</html>
"""

# Create the application instance
app: FastAPI = create_app()
