"""
Sales assistant client side.

Provides:
- Dispatch of a user utterance plus history to the sales agent backend
- Conversation bookkeeping (append-only turns, current structured view)
- Periodic backend health probing
"""

from salesbot.assistant.backend import BackendClient
from salesbot.assistant.conversation import ChatService, ConversationStore
from salesbot.assistant.dispatch import AgentDispatcher, format_history
from salesbot.assistant.health import HealthMonitor

__all__ = [
    "AgentDispatcher",
    "BackendClient",
    "ChatService",
    "ConversationStore",
    "HealthMonitor",
    "format_history",
]
