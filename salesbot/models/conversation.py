"""
Conversation data model.

A conversation is an ordered, append-only list of turns. Turns are frozen
once created; the order is the dialogue history replayed to the model.
"""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from salesbot.models.summary import StructuredSummary


class TurnRole(StrEnum):
    USER = "user"
    AGENT = "agent"


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="Author of the turn (user/agent)")
    text: str = Field(..., description="Text content of the turn")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: Optional[StructuredSummary] = Field(
        default=None, description="Structured result attached to an agent turn"
    )


class DispatchResult(BaseModel):
    """Outcome of one dispatch: always renderable text, optional payload."""

    text: str
    data: Optional[StructuredSummary] = None


class Conversation:
    """Append-only sequence of turns."""

    def __init__(self, turns: Optional[list[ConversationTurn]] = None) -> None:
        self._turns: list[ConversationTurn] = list(turns or [])

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    def snapshot(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._turns)
