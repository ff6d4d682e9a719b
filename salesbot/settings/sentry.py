from typing import Optional

from pydantic import BaseModel, Field


class SentryConfig(BaseModel):
    DSN: Optional[str] = Field(
        default=None,
        description="Sentry DSN; error reporting is disabled when unset",
    )
    TRACES_SAMPLE_RATE: float = Field(
        default=0.0,
        description="Fraction of transactions sent for tracing",
    )
    SEND_DEFAULT_PII: bool = Field(
        default=False,
        description="Attach request headers and client IPs to events",
    )
