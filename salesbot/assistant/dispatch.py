"""
Agent dispatch loop.

Turns a user utterance plus the prior conversation into a DispatchResult.
The language model and the sales query tool run behind the backend; this
side formats the history, sends one request and normalises the outcome.
"""

from typing import Iterable

import httpx
import structlog
from pydantic import ValidationError

from salesbot.assistant.backend import BackendClient
from salesbot.exceptions.assistant import EmptyMessageException
from salesbot.models.conversation import ConversationTurn, DispatchResult, TurnRole
from salesbot.models.summary import StructuredSummary

logger = structlog.get_logger(__name__)

# Wire role names understood by the model backend.
_WIRE_ROLES = {
    TurnRole.USER: "user",
    TurnRole.AGENT: "model",
}


def format_history(turns: Iterable[ConversationTurn]) -> list[dict]:
    """
    Convert turns into the backend's `{role, parts: [{text}]}` format.

    Turns whose role is neither user nor agent are dropped.
    """
    history = []
    for turn in turns:
        wire_role = _WIRE_ROLES.get(turn.role)
        if wire_role is None:
            continue
        history.append({"role": wire_role, "parts": [{"text": turn.text}]})
    return history


class AgentDispatcher:
    """
    Runs one request/response cycle against the sales agent backend.

    dispatch() never raises for backend problems: transport errors,
    non-success statuses and malformed bodies all become a connection-error
    reply without structured data. A well-formed reply whose summary cannot
    be read keeps its text and comes back without data.
    """

    def __init__(self, backend: BackendClient, connection_error_message: str):
        self.backend = backend
        self.connection_error_message = connection_error_message

    def _connection_error(self, error: str) -> DispatchResult:
        return DispatchResult(
            text=self.connection_error_message.format(url=self.backend.chat_url, error=error)
        )

    async def dispatch(
        self,
        user_text: str,
        history: Iterable[ConversationTurn] = (),
    ) -> DispatchResult:
        """
        Send a message with its history and return the agent's reply.

        Args:
            user_text: Raw user input
            history: Prior turns, oldest first; not modified

        Returns:
            DispatchResult with the reply text and the optional structured summary

        Raises:
            EmptyMessageException: If the input is blank; nothing is sent
        """
        message = user_text.strip()
        if not message:
            raise EmptyMessageException()

        formatted = format_history(history)
        logger.info("Dispatching message", history_turns=len(formatted))

        try:
            body = await self.backend.chat(message, formatted)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Agent backend returned an error",
                status_code=e.response.status_code,
            )
            return self._connection_error(
                f"Erro na API: {e.response.status_code} {e.response.reason_phrase}"
            )
        except httpx.HTTPError as e:
            logger.warning("Agent backend unreachable", error=str(e))
            return self._connection_error(str(e) or type(e).__name__)
        except ValueError as e:
            logger.warning("Agent backend sent malformed JSON", error=str(e))
            return self._connection_error(f"invalid response: {e}")

        if not isinstance(body, dict):
            logger.warning("Agent backend sent an unexpected body", body_type=type(body).__name__)
            return self._connection_error("invalid response: expected a JSON object")

        text = body.get("text")
        if not isinstance(text, str):
            text = "" if text is None else str(text)

        data = None
        raw_data = body.get("data")
        if raw_data is not None:
            try:
                data = StructuredSummary.model_validate(raw_data)
            except ValidationError as e:
                # The reply text is still valid; only the view is dropped.
                logger.warning(
                    "Agent backend sent an unreadable summary, keeping text only",
                    invalid_fields=e.error_count(),
                    error=str(e),
                )

        logger.info("Dispatch completed", has_data=data is not None)
        return DispatchResult(text=text, data=data)
