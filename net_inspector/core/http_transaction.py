import logging
import threading
from http import HTTPStatus
from typing import Any, Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from net_inspector.core.transaction import TransactionKind
from net_inspector.core.transaction_state import TransactionState
from net_inspector.core.url_transaction import URLRequest, URLTransaction
from net_inspector.utils.formatting import format_byte_count, format_duration, join_description

logger = logging.getLogger(__name__)

ERROR_STATUS_THRESHOLD = 400


class HTTPResponse(BaseModel):
    """The status line and headers of an HTTP response."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(ge=100, le=999)
    headers: Dict[str, str] = Field(default_factory=dict)
    reason_phrase: Optional[str] = Field(default=None)

    @property
    def is_error(self) -> bool:
        return self.status_code >= ERROR_STATUS_THRESHOLD

    @property
    def status_text(self) -> str:
        """E.g. ``"404 Not Found"``; the bare code when no phrase is known."""
        reason = self.reason_phrase
        if not reason:
            try:
                reason = HTTPStatus(self.status_code).phrase
            except ValueError:
                reason = ""
        return f"{self.status_code} {reason}".strip()

    @property
    def mime_type(self) -> Optional[str]:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value.split(";", 1)[0].strip() or None
        return None


class HTTPTransaction(URLTransaction):
    """A request/response exchange observed on an HTTP client."""

    kind: Literal["http"] = Field(default=TransactionKind.HTTP.value, frozen=True)
    request_id: str = Field(default_factory=lambda: uuid4().hex, frozen=True)
    response: Optional[HTTPResponse] = Field(default=None)
    # Free-text name of the client or library that issued the request
    request_mechanism: Optional[str] = Field(default=None)
    latency: Optional[float] = Field(default=None, ge=0)
    duration: Optional[float] = Field(default=None, ge=0)

    _cached_request_body: Optional[bytes] = PrivateAttr(default=None)
    _request_body_lock: Any = PrivateAttr(default_factory=threading.Lock)

    @classmethod
    def with_request(cls, request: URLRequest, request_id: str, **kwargs: Any) -> "HTTPTransaction":
        return cls(request=request, request_id=request_id, **kwargs)

    # --- Lifecycle ---

    def record_response(self, response: HTTPResponse, latency: Optional[float] = None) -> None:
        changes: Dict[str, Any] = {"response": response}
        if latency is not None:
            changes["latency"] = latency
        self.update_fields(**changes)

    def record_data_received(self, byte_count: int) -> None:
        """Adds ``byte_count`` to the received total and moves to RECEIVING_DATA."""
        with self._lock:
            self.mark_receiving_data(self.received_data_length + byte_count)

    def mark_finished(self, duration: Optional[float] = None) -> None:
        if duration is None:
            super().mark_finished()
        else:
            self.update_fields(duration=duration, state=TransactionState.FINISHED)

    def _accept_assignment(self, name: str, current: Any, value: Any) -> bool:
        if name in ("latency", "duration") and current is not None and self.state.is_terminal:
            logger.warning(f"[{self.transaction_id}] Ignoring change of recorded {name} after {self.state.value}")
            return False
        return super()._accept_assignment(name, current, value)

    # --- Request body ---

    @property
    def cached_request_body(self) -> bytes:
        """The request body, read once from the request's buffer or body stream and then memoized.

        Concurrent first reads are serialized so a single-use stream is consumed at most once.
        """
        cached = self._cached_request_body
        if cached is not None:
            return cached
        with self._request_body_lock:
            if self._cached_request_body is None:
                self._cached_request_body = self._read_request_body()
            return self._cached_request_body

    def _read_request_body(self) -> bytes:
        if self.request.body is not None:
            return self.request.body
        stream = self.request.body_stream
        if stream is None:
            return b""
        try:
            if hasattr(stream, "read"):
                data = stream.read()
            else:
                data = b"".join(stream)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"[{self.transaction_id}] Could not read request body stream: {e}")
            return b""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return bytes(data or b"")

    # --- Descriptions ---

    def _tertiary_description(self) -> str:
        if self.response is None:
            return join_description(self.request.method, self.state_label)
        return join_description(
            self.request.method,
            str(self.response.status_code),
            format_duration(self.duration),
        )

    def _copy_string(self) -> str:
        return f"{self.request.method} {self.request.url}"

    def _is_error(self) -> bool:
        return super()._is_error() or (self.response is not None and self.response.is_error)

    def _details(self) -> List[str]:
        details = [f"Request Method: {self.request.method}"]
        if self.response is not None:
            details.append(f"Status Code: {self.response.status_text}")
            if self.response.mime_type:
                details.append(f"MIME Type: {self.response.mime_type}")
        if self.request_mechanism:
            details.append(f"Request Mechanism: {self.request_mechanism}")
        if self.latency is not None:
            details.append(f"Latency: {format_duration(self.latency)}")
        if self.duration is not None:
            details.append(f"Duration: {format_duration(self.duration)}")
        if self.received_data_length:
            details.append(f"Response Size: {format_byte_count(self.received_data_length)}")
        if self.error is not None:
            details.append(f"Error: {self.error}")
        return details

    def _searchable_strings(self) -> List[str]:
        strings = super()._searchable_strings()
        strings.extend(self.request.headers.values())
        if self.response is not None:
            strings.append(self.response.status_text)
            strings.extend(self.response.headers.values())
        return strings
