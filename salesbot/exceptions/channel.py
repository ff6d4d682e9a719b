"""
Exceptions raised while talking to the messaging gateway.

These never reach the HTTP layer: the session manager turns them into a
state transition or a status string.
"""

from typing import Optional

from salesbot.exceptions.app import AppException, ErrorTypes


class GatewayTransportException(AppException):
    """Raised when a gateway request fails before any HTTP response arrives."""

    def __init__(
        self,
        operation: str,
        session_name: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs,
    ) -> None:
        if message is None:
            message = f"Gateway request '{operation}' failed"
        super().__init__(
            type=ErrorTypes.ExternalServiceError,
            message=message,
            resource="gateway",
            field="session_name",
            value=session_name,
            operation=operation,
            **kwargs,
        )
        self.operation = operation


class GatewayCreateException(AppException):
    """Raised when the gateway refuses to create an instance."""

    def __init__(
        self,
        session_name: str,
        status_code: int,
        body: str = "",
        **kwargs,
    ) -> None:
        super().__init__(
            type=ErrorTypes.ExternalServiceError,
            message=f"Gateway create failed ({status_code}): {body}",
            resource="gateway",
            field="session_name",
            value=session_name,
            **kwargs,
        )
        self.status_code = status_code
        self.body = body


class InvalidSessionNameException(AppException):
    """Raised when nothing usable is left of a session name after cleaning."""

    def __init__(self, raw_name: str, **kwargs) -> None:
        super().__init__(
            type=ErrorTypes.InputValidationError,
            message="Session name must contain lowercase letters, digits or underscores",
            resource="channel_session",
            field="name",
            value=raw_name,
            **kwargs,
        )
