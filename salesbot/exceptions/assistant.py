"""
Custom exceptions for conversation and backend operations.
"""

from typing import Optional

from salesbot.exceptions.app import AppException, ErrorTypes


class EmptyMessageException(AppException):
    """Raised when a blank message is submitted for dispatch."""

    def __init__(self, message: str = "Message must not be empty", **kwargs) -> None:
        super().__init__(
            type=ErrorTypes.InputValidationError,
            message=message,
            resource="conversation",
            field="message",
            **kwargs,
        )


class ConversationBusyException(AppException):
    """Raised when an exchange is already in flight for the conversation."""

    def __init__(self, conversation_id: str, message: Optional[str] = None, **kwargs) -> None:
        if message is None:
            message = f"Conversation '{conversation_id}' is still waiting for a reply"
        super().__init__(
            type=ErrorTypes.ResourceBusy,
            message=message,
            resource="conversation",
            field="conversation_id",
            value=conversation_id,
            **kwargs,
        )


class ConversationNotFoundException(AppException):
    """Raised when a conversation id is unknown."""

    def __init__(self, conversation_id: str, **kwargs) -> None:
        super().__init__(
            type=ErrorTypes.ResourceNotFound,
            message=f"Conversation '{conversation_id}' not found",
            resource="conversation",
            field="conversation_id",
            value=conversation_id,
            **kwargs,
        )


class BackendUnavailableException(AppException):
    """Raised when the sales backend cannot serve a structured query."""

    def __init__(self, url: str, message: Optional[str] = None, **kwargs) -> None:
        if message is None:
            message = f"Sales backend at '{url}' is unavailable"
        super().__init__(
            type=ErrorTypes.ExternalServiceError,
            message=message,
            resource="backend",
            field="url",
            value=url,
            **kwargs,
        )
