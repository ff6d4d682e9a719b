"""
FastAPI lifespan context manager for application startup and shutdown.

This module provides a lifespan context manager that handles:
- Logging and error reporting configuration
- The shared outbound HTTP client
- Channel session manager, assistant components and health monitor
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI
from starlette.datastructures import State

from salesbot.assistant.backend import BackendClient
from salesbot.assistant.conversation import ChatService, ConversationStore
from salesbot.assistant.dispatch import AgentDispatcher
from salesbot.assistant.health import HealthMonitor
from salesbot.channel.session import ChannelSessionManager
from salesbot.logging import setup_logging
from salesbot.sentry import setup_sentry
from salesbot.service.whatsapp import WhatsappBridgeService
from salesbot.settings import Settings, get_settings

logger = structlog.get_logger(__name__)


def init_components(state: State, settings: Settings, http_client: httpx.AsyncClient) -> None:
    """Build the long-lived components and attach them to the app state."""
    assistant = settings.ASSISTANT

    backend = BackendClient(
        http_client, assistant.BACKEND_URL, timeout=assistant.REQUEST_TIMEOUT
    )
    store = ConversationStore(
        welcome_message=assistant.WELCOME_MESSAGE,
        max_conversations=assistant.MAX_CONVERSATIONS,
    )
    dispatcher = AgentDispatcher(backend, assistant.CONNECTION_ERROR_MESSAGE)
    chat_service = ChatService(
        dispatcher,
        store,
        internal_error_message=assistant.INTERNAL_ERROR_MESSAGE,
        history_limit=assistant.HISTORY_LIMIT,
    )
    session_manager = ChannelSessionManager(http_client, settings.GATEWAY)

    state.backend = backend
    state.conversation_store = store
    state.chat_service = chat_service
    state.session_manager = session_manager
    state.health_monitor = HealthMonitor(backend, interval=assistant.HEALTH_INTERVAL)
    state.whatsapp_service = WhatsappBridgeService(
        chat_service,
        session_manager,
        http_client,
        settings.GATEWAY,
        busy_message=assistant.BUSY_MESSAGE,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Handles application startup and shutdown events:
    - Startup: Setup logging, build components and start the health monitor
    - Shutdown: Stop polling and probing, close the HTTP client

    An HTTP client already present on ``app.state`` is used as-is and left
    open on shutdown.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    logger.debug("Application startup initiated")
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    http_client: Optional[httpx.AsyncClient] = getattr(app.state, "http_client", None)
    owns_client = http_client is None
    try:
        setup_logging(settings)
        setup_sentry(settings)

        if owns_client:
            http_client = httpx.AsyncClient(timeout=settings.GATEWAY.REQUEST_TIMEOUT)
            app.state.http_client = http_client

        init_components(app.state, settings, http_client)
        app.state.health_monitor.start()

        logger.info(
            "Application startup completed successfully",
            environment=settings.ENVIRONMENT,
            gateway_url=settings.GATEWAY.URL,
            backend_url=settings.ASSISTANT.BACKEND_URL,
        )

    except Exception as e:
        logger.error(
            "Failed to initialize application",
            error=str(e),
            exc_info=True,
        )
        raise

    # Application is running - yield control to FastAPI
    yield

    # Shutdown: Cleanup resources
    logger.debug("Application shutdown initiated")

    try:
        await app.state.session_manager.close()
        await app.state.health_monitor.close()
        if owns_client:
            await http_client.aclose()
            app.state.http_client = None
        logger.debug("Application shutdown completed successfully")

    except Exception as e:
        logger.error(
            "Error during application shutdown",
            error=str(e),
            exc_info=True,
        )
        raise
