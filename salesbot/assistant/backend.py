"""
HTTP client for the sales agent backend.

The backend exposes three endpoints under /api/v1: chat (language model with
the sales query tool), query (structured sales summary) and health.
"""

from typing import Any, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


class BackendClient:
    """
    Sends requests to the sales agent backend.

    Status codes are checked here; callers decide how failures surface.
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, timeout: Optional[float] = None):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/api/v1{endpoint}"

    def _request_kwargs(self) -> dict:
        if self.timeout is None:
            return {}
        return {"timeout": self.timeout}

    @property
    def chat_url(self) -> str:
        return self._build_url("/chat")

    async def chat(self, message: str, history: list[dict]) -> dict[str, Any]:
        """
        Ask the agent for a reply.

        Raises:
            httpx.HTTPError: On transport failure or a non-success status
            ValueError: If the body is not JSON
        """
        response = await self.http_client.post(
            self.chat_url,
            json={"message": message, "history": history},
            **self._request_kwargs(),
        )
        response.raise_for_status()
        return response.json()

    async def query(self, filters: dict[str, Any]) -> dict[str, Any]:
        """Run a structured sales query and return the raw summary."""
        response = await self.http_client.post(
            self._build_url("/query"), json=filters, **self._request_kwargs()
        )
        response.raise_for_status()
        return response.json()

    async def health(self) -> dict[str, Any]:
        response = await self.http_client.get(
            self._build_url("/health"), **self._request_kwargs()
        )
        response.raise_for_status()
        return response.json()
