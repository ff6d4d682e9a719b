"""
HTTP client for the messaging gateway (Evolution API v2 compatible).

Every call returns the raw status code and body; interpreting them is the
caller's job. Only transport failures raise.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx
import structlog

from salesbot.exceptions.channel import GatewayTransportException

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GatewayResponse:
    """Status code and body of one gateway call."""

    status_code: int
    text: str = ""
    body: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "GatewayResponse":
        try:
            body = response.json()
        except ValueError:
            body = None
        return cls(status_code=response.status_code, text=response.text, body=body)


class GatewayClient:
    """
    Builds and sends requests to one gateway.

    The underlying httpx client is shared and owned by the caller; this
    class holds no session state of its own.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        integration: str = "WHATSAPP-BAILEYS",
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.integration = integration

    def _get_headers(self) -> dict:
        return {"Content-Type": "application/json", "apikey": self.api_key}

    def _build_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        session_name: str,
        json: Optional[dict] = None,
    ) -> GatewayResponse:
        url = self._build_url(path)
        try:
            response = await self.http_client.request(
                method, url, json=json, headers=self._get_headers()
            )
        except httpx.HTTPError as e:
            logger.warning(
                "Gateway request failed",
                operation=operation,
                session_name=session_name,
                url=url,
                error=str(e),
            )
            raise GatewayTransportException(
                operation=operation,
                session_name=session_name,
                message=f"Gateway request '{operation}' failed: {e}",
            ) from e

        logger.debug(
            "Gateway response",
            operation=operation,
            session_name=session_name,
            status_code=response.status_code,
        )
        return GatewayResponse.from_httpx(response)

    async def delete_instance(self, session_name: str) -> GatewayResponse:
        return await self._send(
            "delete_instance", "DELETE", f"/instance/delete/{session_name}", session_name
        )

    async def create_instance(self, session_name: str) -> GatewayResponse:
        """Create an instance that pairs through a QR code."""
        return await self._send(
            "create_instance",
            "POST",
            "/instance/create",
            session_name,
            json={
                "instanceName": session_name,
                "qrcode": True,
                "integration": self.integration,
            },
        )

    async def connect_instance(self, session_name: str) -> GatewayResponse:
        return await self._send(
            "connect_instance", "GET", f"/instance/connect/{session_name}", session_name
        )

    async def send_text(self, session_name: str, number: str, text: str) -> GatewayResponse:
        """Deliver a text message through a connected instance."""
        return await self._send(
            "send_text",
            "POST",
            f"/message/sendText/{session_name}",
            session_name,
            json={"number": number, "text": text},
        )
