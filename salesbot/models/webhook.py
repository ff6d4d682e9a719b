from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class IncomingMessage(BaseModel):
    """
    Message pushed by the messaging gateway webhook.

    Gateways disagree on where the text lives and some send nested objects
    under the same keys; only a plain string counts as text.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    sender: Optional[str] = Field(None, alias="from")
    body: Any = None
    content: Any = None
    message: Any = None

    @property
    def text(self) -> Optional[str]:
        for value in (self.body, self.content, self.message):
            if isinstance(value, str) and value:
                return value
        return None

    @property
    def is_group(self) -> bool:
        return bool(self.sender) and "@g.us" in self.sender


class WebhookAck(BaseModel):
    status: str
