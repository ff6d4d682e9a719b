"""
Service layer bridging the messaging gateway to the sales assistant.

Inbound gateway messages are filtered, run through the conversation keyed by
the sender, and the agent reply is delivered back through the gateway.
"""

import httpx
import structlog

from salesbot.assistant.conversation import ChatService
from salesbot.channel.session import ChannelSessionManager
from salesbot.exceptions.app import AppException
from salesbot.exceptions.assistant import ConversationBusyException
from salesbot.gateway.client import GatewayClient
from salesbot.models.webhook import IncomingMessage
from salesbot.settings.gateway import GatewayConfig

logger = structlog.get_logger(__name__)


def phone_number(sender: str) -> str:
    """Strip the `@...` suffix from a gateway sender id."""
    return sender.split("@", 1)[0]


class WhatsappBridgeService:
    """
    Service for answering messages that arrive over the gateway webhook.

    Replies go out through the connected session when there is one,
    otherwise through the configured default session.
    """

    def __init__(
        self,
        chat_service: ChatService,
        session_manager: ChannelSessionManager,
        http_client: httpx.AsyncClient,
        config: GatewayConfig,
        busy_message: str,
    ) -> None:
        self.chat_service = chat_service
        self.session_manager = session_manager
        self.http_client = http_client
        self.config = config
        self.busy_message = busy_message

    def accepts(self, message: IncomingMessage) -> bool:
        """Whether the message should get a reply at all."""
        return bool(message.text) and bool(message.sender) and not message.is_group

    def _outbound(self) -> tuple[GatewayClient, str]:
        connected = self.session_manager.connected_session_name
        if connected is not None and self.session_manager.client is not None:
            return self.session_manager.client, connected
        client = GatewayClient(
            self.http_client,
            base_url=self.config.URL,
            api_key=self.config.API_KEY,
            integration=self.config.INTEGRATION,
        )
        return client, self.config.SESSION_NAME

    async def handle(self, message: IncomingMessage) -> None:
        """
        Run one exchange for the sender and deliver the reply.

        Runs as a background task after the webhook has been acknowledged,
        so every failure is logged here instead of raised.
        """
        sender = message.sender
        log = logger.bind(sender=sender)
        log.info("WhatsApp message received")

        try:
            result = await self.chat_service.send(sender, message.text)
            reply = result.reply.text
        except ConversationBusyException:
            reply = self.busy_message
        except AppException as e:
            log.warning("WhatsApp message rejected", error=e.message)
            return

        if not reply:
            log.debug("Empty reply, nothing to deliver")
            return
        await self.deliver(sender, reply)

    async def deliver(self, sender: str, text: str) -> bool:
        """Send a text to the sender. Returns whether the gateway accepted it."""
        client, session_name = self._outbound()
        number = phone_number(sender)
        try:
            response = await client.send_text(session_name, number, text)
        except AppException as e:
            logger.error(
                "WhatsApp delivery failed",
                session_name=session_name,
                number=number,
                error=e.message,
            )
            return False

        if not response.ok:
            logger.error(
                "WhatsApp delivery rejected",
                session_name=session_name,
                number=number,
                status_code=response.status_code,
                body=response.text,
            )
            return False

        logger.info("WhatsApp reply delivered", session_name=session_name, number=number)
        return True
