"""
WhatsApp webhook controller.

The gateway pushes inbound messages here; replies are produced in the
background and delivered through the gateway.
"""

from fastapi import APIRouter, BackgroundTasks
import structlog

from salesbot.dependencies import WhatsappServiceDep
from salesbot.models.webhook import IncomingMessage, WebhookAck

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/whatsapp", tags=["WhatsApp"])


@router.post(
    "/webhook",
    response_model=WebhookAck,
    summary="Receive a message from the messaging gateway",
)
async def receive_message(
    message: IncomingMessage,
    background_tasks: BackgroundTasks,
    whatsapp_service: WhatsappServiceDep,
):
    if not whatsapp_service.accepts(message):
        logger.debug("WhatsApp message ignored", sender=message.sender)
        return WebhookAck(status="ignored")

    background_tasks.add_task(whatsapp_service.handle, message)
    return WebhookAck(status="processing")
