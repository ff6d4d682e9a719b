"""
Conversation bookkeeping for the sales assistant.

Keeps each conversation's turns and its current structured view in a
bounded in-memory store, and runs exchanges through the dispatcher with a
window of recent history, one at a time per conversation.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

import structlog

from salesbot.assistant.dispatch import AgentDispatcher
from salesbot.exceptions.assistant import (
    ConversationBusyException,
    ConversationNotFoundException,
    EmptyMessageException,
)
from salesbot.models.conversation import (
    Conversation,
    ConversationTurn,
    DispatchResult,
    TurnRole,
)
from salesbot.models.summary import StructuredSummary

logger = structlog.get_logger(__name__)


@dataclass
class ConversationRecord:
    """A conversation plus the state an exchange needs around it."""

    conversation: Conversation = field(default_factory=Conversation)
    current_view: Optional[StructuredSummary] = None
    in_flight: bool = False


@dataclass(frozen=True)
class ExchangeResult:
    reply: ConversationTurn
    current_view: Optional[StructuredSummary]


class ConversationStore:
    """
    In-memory conversation storage keyed by conversation id.

    Holds at most `max_conversations` records. Creating one past the limit
    evicts the least recently used conversation that is not mid-exchange.
    """

    def __init__(self, welcome_message: Optional[str] = None, max_conversations: int = 500):
        self.welcome_message = welcome_message
        self.max_conversations = max_conversations
        self._records: OrderedDict[str, ConversationRecord] = OrderedDict()

    def get(self, conversation_id: str) -> ConversationRecord:
        """
        Raises:
            ConversationNotFoundException: If the id is unknown
        """
        record = self._records.get(conversation_id)
        if record is None:
            raise ConversationNotFoundException(conversation_id)
        self._records.move_to_end(conversation_id)
        return record

    def get_or_create(self, conversation_id: str) -> ConversationRecord:
        record = self._records.get(conversation_id)
        if record is not None:
            self._records.move_to_end(conversation_id)
            return record

        record = ConversationRecord()
        if self.welcome_message:
            record.conversation.append(
                ConversationTurn(role=TurnRole.AGENT, text=self.welcome_message)
            )
        self._records[conversation_id] = record
        logger.debug("Conversation created", conversation_id=conversation_id)
        self._evict(keep=conversation_id)
        return record

    def _evict(self, keep: str) -> None:
        overflow = len(self._records) - self.max_conversations
        if overflow <= 0:
            return
        idle = [
            cid
            for cid, record in self._records.items()
            if cid != keep and not record.in_flight
        ]
        for conversation_id in idle[:overflow]:
            del self._records[conversation_id]
            logger.debug("Conversation evicted", conversation_id=conversation_id)

    def delete(self, conversation_id: str) -> None:
        if self._records.pop(conversation_id, None) is None:
            raise ConversationNotFoundException(conversation_id)
        logger.debug("Conversation deleted", conversation_id=conversation_id)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class ChatService:
    """
    Orchestrates one exchange: user turn in, exactly one agent turn out.

    Overlapping exchanges on the same conversation are rejected with
    ConversationBusyException instead of being interleaved.
    """

    def __init__(
        self,
        dispatcher: AgentDispatcher,
        store: ConversationStore,
        internal_error_message: str = "Desculpe, tive um problema interno crítico.",
        history_limit: int = 20,
    ):
        self.dispatcher = dispatcher
        self.store = store
        self.internal_error_message = internal_error_message
        self.history_limit = history_limit

    async def send(self, conversation_id: str, text: str) -> ExchangeResult:
        """
        Run one exchange for a conversation.

        The dispatcher sees the last `history_limit` turns as they were
        before this user turn.

        Raises:
            EmptyMessageException: If the text is blank; nothing is appended
            ConversationBusyException: If an exchange is already in flight
        """
        if not text.strip():
            raise EmptyMessageException()

        record = self.store.get_or_create(conversation_id)
        if record.in_flight:
            logger.warning("Conversation busy, rejecting message", conversation_id=conversation_id)
            raise ConversationBusyException(conversation_id)

        record.in_flight = True
        try:
            history = record.conversation.snapshot()[-self.history_limit :]
            record.conversation.append(ConversationTurn(role=TurnRole.USER, text=text))

            try:
                result = await self.dispatcher.dispatch(text, history)
            except Exception as e:
                logger.error(
                    "Dispatch failed unexpectedly",
                    conversation_id=conversation_id,
                    error=str(e),
                    exc_info=True,
                )
                result = DispatchResult(text=self.internal_error_message)

            reply = ConversationTurn(role=TurnRole.AGENT, text=result.text, data=result.data)
            record.conversation.append(reply)
            if result.data is not None:
                record.current_view = result.data
        finally:
            record.in_flight = False

        logger.info(
            "Exchange completed",
            conversation_id=conversation_id,
            turns=len(record.conversation),
            has_data=result.data is not None,
        )
        return ExchangeResult(reply=reply, current_view=record.current_view)
