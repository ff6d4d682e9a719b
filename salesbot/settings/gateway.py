"""
Messaging gateway configuration.

Defaults target a locally running WhatsApp-compatible gateway
(Evolution API v2 flavour) and the pacing used while pairing a session.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewayConfig(BaseSettings):
    """Connection and pacing settings for the messaging gateway."""

    URL: str = Field(
        default="http://localhost:8082",
        description="Base URL of the messaging gateway",
    )
    API_KEY: str = Field(
        default="",
        description="Value sent in the gateway 'apikey' header",
    )
    INTEGRATION: str = Field(
        default="WHATSAPP-BAILEYS",
        description="Integration flavour requested when creating an instance",
    )
    SESSION_NAME: str = Field(
        default="salesbot_v2",
        description="Session used for outbound replies when none is connected",
    )
    SETTLE_DELAY: float = Field(
        default=2.0,
        description="Seconds to wait after deleting an instance before creating it",
    )
    POLL_INTERVAL: float = Field(
        default=2.0,
        description="Seconds between connection-state polls",
    )
    REQUEST_TIMEOUT: float = Field(
        default=30.0,
        description="Timeout in seconds for a single gateway request",
    )

    model_config = SettingsConfigDict(case_sensitive=False, extra="forbid")

    @field_validator("SETTLE_DELAY", "POLL_INTERVAL")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Delays cannot be negative."""
        if v < 0:
            raise ValueError("Delays must be zero or positive")
        return v

    @field_validator("URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
