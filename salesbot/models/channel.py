"""
Channel session models.

SessionState is the lifecycle of one gateway session as seen by the
operator; GatewayConnectionState is the canonical form of whatever state
string the gateway reports.
"""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field


class SessionState(StrEnum):
    IDLE = "idle"
    RESETTING = "resetting"
    CREATING = "creating"
    AWAITING_QR = "awaiting-qr"
    AWAITING_SCAN = "awaiting-scan"
    CONNECTED = "connected"
    ERROR = "error"


class GatewayConnectionState(StrEnum):
    OPEN = "open"
    CONNECTING = "connecting"
    CLOSE = "close"
    QRCODE = "qrcode"
    UNKNOWN = "unknown"


class SessionStatus(BaseModel):
    """Read-only view of the channel session."""

    state: SessionState = Field(..., description="Lifecycle state")
    session_name: Optional[str] = Field(None, description="Cleaned session name")
    gateway_status: str = Field("", description="Last gateway status, uppercased")
    qr_code: Optional[str] = Field(None, description="Image-encoded QR payload")
    error: Optional[str] = Field(None, description="Last error message")


class StartSessionRequest(BaseModel):
    name: str = Field(..., description="Operator chosen session name")
    gateway_url: Optional[str] = Field(
        None, description="Gateway base URL; configured default when omitted"
    )
    api_key: Optional[str] = Field(
        None, description="Gateway API key; configured default when omitted"
    )
