"""
Assistant configuration settings using Pydantic.
"""

from pydantic import BaseModel, Field, field_validator


class AssistantConfig(BaseModel):
    BACKEND_URL: str = Field(
        default="http://localhost:8085",
        description="Base URL of the sales agent backend (chat, query, health)",
    )
    REQUEST_TIMEOUT: float = Field(
        default=60.0,
        description="Timeout in seconds for a single backend request",
    )
    HEALTH_INTERVAL: float = Field(
        default=30.0,
        description="Seconds between backend health probes",
    )
    CONNECTION_ERROR_MESSAGE: str = Field(
        default=(
            "Erro de conexão com o servidor ({url}): {error}.\n\n"
            "DICA: verifique se o endereço da API está correto "
            "(use o IP do servidor se não estiver no mesmo PC)."
        ),
        description="Reply shown when the backend cannot be reached; "
        "formatted with {url} and {error}",
    )
    BUSY_MESSAGE: str = Field(
        default="Ainda estou processando sua mensagem anterior, aguarde um instante.",
        description="Reply sent over the messaging channel while a dispatch is in flight",
    )
    INTERNAL_ERROR_MESSAGE: str = Field(
        default="Desculpe, tive um problema interno crítico.",
        description="Reply appended when an exchange fails unexpectedly",
    )
    WELCOME_MESSAGE: str = Field(
        default="Olá! O SalesBot está online e pronto para consultar as vendas.",
        description="First agent turn of every new conversation",
    )

    HISTORY_LIMIT: int = Field(
        default=20,
        description="Most recent turns replayed to the backend with each message",
    )
    MAX_CONVERSATIONS: int = Field(
        default=500,
        description="Conversations kept in memory; the least recently used idle one is evicted",
    )

    @field_validator("HISTORY_LIMIT", "MAX_CONVERSATIONS")
    @classmethod
    def validate_positive_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Limits must be at least 1")
        return v

    @field_validator("BACKEND_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("HEALTH_INTERVAL")
    @classmethod
    def validate_health_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Health interval must be positive")
        return v
