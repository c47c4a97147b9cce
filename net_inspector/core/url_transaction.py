import abc
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from net_inspector.core.transaction import NetworkTransaction


class URLRequest(BaseModel):
    """The addressable resource of a request/response-style exchange.

    ``body`` and ``body_stream`` are opaque; at most one is expected to be present. A body stream
    is single-use and is either an iterable of byte chunks or a file-like object with ``read()``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = Field(default="GET")
    url: str = Field()
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[bytes] = Field(default=None)
    body_stream: Optional[Any] = Field(default=None, exclude=True)

    @field_validator("method")
    @classmethod
    def normalize_method(cls, value: str) -> str:
        return value.upper()

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        parsed = urlsplit(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid request URL: {value}")
        return value

    @property
    def host(self) -> str:
        return urlsplit(self.url).netloc

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def path_and_query(self) -> str:
        """The URL's path plus query string, or the full URL when the path is empty."""
        parsed = urlsplit(self.url)
        if not parsed.path:
            return self.url
        if parsed.query:
            return f"{parsed.path}?{parsed.query}"
        return parsed.path


class URLTransaction(NetworkTransaction, abc.ABC):
    """The shared base class for URL-addressed exchanges.

    Descriptions default to the request URL's path and host; subclasses provide the rest.
    """

    request: URLRequest = Field(frozen=True)

    @property
    def details(self) -> List[str]:
        """"Label: value" lines for a detail view."""
        with self._lock:
            return self._details()

    @abc.abstractmethod
    def _details(self) -> List[str]: ...

    def _primary_description(self) -> str:
        return self.request.path_and_query

    def _secondary_description(self) -> str:
        return self.request.host
