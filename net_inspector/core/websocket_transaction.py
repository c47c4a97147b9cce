import base64
from datetime import datetime
from enum import Enum
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from net_inspector.core.transaction import TransactionKind
from net_inspector.core.transaction_state import TransactionState
from net_inspector.core.url_transaction import URLRequest, URLTransaction
from net_inspector.settings import Settings
from net_inspector.utils.formatting import format_byte_count, join_description, truncate


class WebSocketDirection(str, Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"

    @property
    def arrow(self) -> str:
        return "→" if self is WebSocketDirection.OUTGOING else "←"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class WebSocketMessage(BaseModel):
    """A single WebSocket frame payload, text or binary."""

    model_config = ConfigDict(frozen=True)

    data: Union[str, bytes]

    @property
    def is_text(self) -> bool:
        return isinstance(self.data, str)

    @property
    def byte_length(self) -> int:
        """Text frames are measured by their UTF-8 encoded length."""
        if isinstance(self.data, str):
            return len(self.data.encode("utf-8"))
        return len(self.data)


class WebSocketTransaction(URLTransaction):
    """One frame sent or received on a WebSocket.

    Outgoing frames are complete when observed, so they start out FINISHED; incoming frames keep
    whatever state the collaborator assigns.
    """

    kind: Literal["websocket"] = Field(default=TransactionKind.WEBSOCKET.value, frozen=True)
    message: WebSocketMessage = Field(frozen=True)
    direction: WebSocketDirection = Field(frozen=True)

    def model_post_init(self, context: Any, /) -> None:
        super().model_post_init(context)
        if self.direction is WebSocketDirection.OUTGOING and "state" not in self.model_fields_set:
            self.state = TransactionState.FINISHED

    @classmethod
    def with_message(
        cls,
        message: WebSocketMessage,
        request: URLRequest,
        direction: WebSocketDirection,
        start_time: Optional[datetime] = None,
    ) -> "WebSocketTransaction":
        kwargs: dict[str, Any] = {"message": message, "request": request, "direction": direction}
        if start_time is not None:
            kwargs["start_time"] = start_time
        return cls(**kwargs)

    @property
    def data_length(self) -> int:
        return self.message.byte_length

    def _payload_preview(self) -> str:
        if self.message.is_text:
            return truncate(str(self.message.data), Settings().get_preview_length())
        return f"<binary data, {format_byte_count(self.data_length)}>"

    def _primary_description(self) -> str:
        return f"{self.direction.arrow} {self._payload_preview()}"

    def _secondary_description(self) -> str:
        return f"{self.request.host}{self.request.path}"

    def _tertiary_description(self) -> str:
        return join_description(
            self.direction.label,
            format_byte_count(self.data_length),
            self._formatted_start_time(),
        )

    def _copy_string(self) -> str:
        if isinstance(self.message.data, str):
            return self.message.data
        return base64.b64encode(self.message.data).decode("ascii")

    def _details(self) -> List[str]:
        return [
            f"Direction: {self.direction.label}",
            f"Frame Type: {'Text' if self.message.is_text else 'Binary'}",
            f"Size: {format_byte_count(self.data_length)}",
            f"Socket: {self.request.url}",
        ]
