# Dependencies for the sales assistant components
from typing import Annotated

from fastapi import Depends, Request

from salesbot.assistant.backend import BackendClient
from salesbot.assistant.conversation import ChatService, ConversationStore
from salesbot.assistant.health import HealthMonitor


def get_backend_client(request: Request) -> BackendClient:
    return request.app.state.backend


def get_conversation_store(request: Request) -> ConversationStore:
    return request.app.state.conversation_store


def get_chat_service(request: Request) -> ChatService:
    """Return the ChatService wired to the shared store and dispatcher."""
    return request.app.state.chat_service


def get_health_monitor(request: Request) -> HealthMonitor:
    return request.app.state.health_monitor


BackendClientDep = Annotated[BackendClient, Depends(get_backend_client)]
ConversationStoreDep = Annotated[ConversationStore, Depends(get_conversation_store)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
HealthMonitorDep = Annotated[HealthMonitor, Depends(get_health_monitor)]
