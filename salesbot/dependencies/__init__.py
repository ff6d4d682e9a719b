"""
Dependencies module for FastAPI dependency injection.

This module contains the dependencies resolving the long-lived channel and
assistant components from the application state.
"""

from salesbot.dependencies.assistant import (
    BackendClientDep,
    ChatServiceDep,
    ConversationStoreDep,
    HealthMonitorDep,
)
from salesbot.dependencies.channel import SessionManagerDep
from salesbot.dependencies.whatsapp import WhatsappServiceDep

__all__ = [
    "BackendClientDep",
    "ChatServiceDep",
    "ConversationStoreDep",
    "HealthMonitorDep",
    "SessionManagerDep",
    "WhatsappServiceDep",
]
