"""
Models module for Pydantic data models.

This module contains all Pydantic models used for request/response validation,
data serialization, and type safety throughout the application.
"""

from salesbot.models.agent import ConversationDetail, ExchangeResponse, MessageRequest
from salesbot.models.base import ResponseModel
from salesbot.models.channel import (
    GatewayConnectionState,
    SessionState,
    SessionStatus,
    StartSessionRequest,
)
from salesbot.models.conversation import (
    Conversation,
    ConversationTurn,
    DispatchResult,
    TurnRole,
)
from salesbot.models.errors import HTTPDetail, HTTPException
from salesbot.models.health import HealthReport, HealthStatus
from salesbot.models.summary import FilterParams, StructuredSummary, SummaryView
from salesbot.models.webhook import IncomingMessage, WebhookAck

__all__ = [
    # Base models
    "ResponseModel",
    # Error models
    "HTTPDetail",
    "HTTPException",
    # Channel models
    "GatewayConnectionState",
    "SessionState",
    "SessionStatus",
    "StartSessionRequest",
    # Conversation models
    "Conversation",
    "ConversationTurn",
    "DispatchResult",
    "TurnRole",
    "ConversationDetail",
    "ExchangeResponse",
    "MessageRequest",
    # Backend models
    "FilterParams",
    "HealthReport",
    "HealthStatus",
    "StructuredSummary",
    "SummaryView",
    # Webhook models
    "IncomingMessage",
    "WebhookAck",
]
