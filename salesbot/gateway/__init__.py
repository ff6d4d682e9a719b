"""
Messaging gateway integration.

A thin request builder over the gateway's instance endpoints plus the
normalisation of its loosely shaped connection-state responses.
"""

from salesbot.gateway.client import GatewayClient, GatewayResponse
from salesbot.gateway.parsing import ConnectSnapshot, parse_connect_body

__all__ = [
    "ConnectSnapshot",
    "GatewayClient",
    "GatewayResponse",
    "parse_connect_body",
]
