"""
Exceptions module for custom application exceptions.

This module contains all custom exception classes that extend from AppException
and are used throughout the application for error handling.
"""

from salesbot.exceptions.app import AppException, ErrorTypes
from salesbot.exceptions.assistant import (
    BackendUnavailableException,
    ConversationBusyException,
    ConversationNotFoundException,
    EmptyMessageException,
)
from salesbot.exceptions.channel import (
    GatewayCreateException,
    GatewayTransportException,
    InvalidSessionNameException,
)

__all__ = [
    # Base exceptions
    "AppException",
    "ErrorTypes",
    # Assistant
    "BackendUnavailableException",
    "ConversationBusyException",
    "ConversationNotFoundException",
    "EmptyMessageException",
    # Channel
    "GatewayCreateException",
    "GatewayTransportException",
    "InvalidSessionNameException",
]
