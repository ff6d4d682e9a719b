from typing import Optional
from pydantic import BaseModel, Field

from salesbot.models.conversation import ConversationTurn
from salesbot.models.summary import StructuredSummary


class MessageRequest(BaseModel):
    message: str = Field(..., description="The message or query from the user")


class ExchangeResponse(BaseModel):
    conversation_id: str = Field(..., description="Conversation the exchange belongs to")
    reply: ConversationTurn = Field(..., description="Agent turn appended by the exchange")
    current_view: Optional[StructuredSummary] = Field(
        None, description="Structured view after the exchange"
    )


class ConversationDetail(BaseModel):
    conversation_id: str
    turns: list[ConversationTurn] = Field(default_factory=list)
    current_view: Optional[StructuredSummary] = None
