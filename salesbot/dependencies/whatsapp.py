# Dependency to get the WhatsApp bridge service
from typing import Annotated

from fastapi import Depends, Request

from salesbot.service.whatsapp import WhatsappBridgeService


def get_whatsapp_service(request: Request) -> WhatsappBridgeService:
    return request.app.state.whatsapp_service


WhatsappServiceDep = Annotated[WhatsappBridgeService, Depends(get_whatsapp_service)]
