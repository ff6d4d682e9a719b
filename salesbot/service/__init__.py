"""
Service module for business logic.

This module contains service classes that sit between the HTTP handlers and
the channel and assistant components.
"""
from .whatsapp import WhatsappBridgeService, phone_number

__all__ = [
    "WhatsappBridgeService",
    "phone_number",
]
