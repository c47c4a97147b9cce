"""Records every request sent through an httpx client as an HTTPTransaction."""

import logging
import time
from typing import Callable, Iterator

import httpx

from net_inspector.core.http_transaction import HTTPResponse, HTTPTransaction
from net_inspector.core.url_transaction import URLRequest

logger = logging.getLogger(__name__)

TransactionCallback = Callable[[HTTPTransaction], None]


def url_request_from_httpx(request: httpx.Request) -> URLRequest:
    """Converts an httpx request. Streaming bodies are left out so they are not consumed twice."""
    try:
        body = request.content or None
    except httpx.RequestNotRead:
        body = None
    return URLRequest(method=request.method, url=str(request.url), headers=dict(request.headers), body=body)


def http_response_from_httpx(response: httpx.Response) -> HTTPResponse:
    return HTTPResponse(
        status_code=response.status_code,
        headers=dict(response.headers),
        reason_phrase=response.reason_phrase or None,
    )


class RecordingByteStream(httpx.SyncByteStream):
    """Passes response chunks through while counting them into the transaction."""

    def __init__(self, stream: httpx.SyncByteStream, transaction: HTTPTransaction, started: float):
        self._stream = stream
        self._transaction = transaction
        self._started = started

    def __iter__(self) -> Iterator[bytes]:
        try:
            for chunk in self._stream:
                self._transaction.record_data_received(len(chunk))
                yield chunk
        except Exception as e:
            self._transaction.mark_failed(e)
            raise
        self._transaction.mark_finished(duration=time.monotonic() - self._started)

    def close(self) -> None:
        self._stream.close()


class RecordingTransport(httpx.BaseTransport):
    """An httpx transport wrapper that reports each exchange to ``on_transaction``.

    Usage:
        net_inspector.setup_logging()
        transactions = []
        client = httpx.Client(transport=RecordingTransport(httpx.HTTPTransport(), transactions.append))
    """

    def __init__(
        self,
        transport: httpx.BaseTransport,
        on_transaction: TransactionCallback,
        request_mechanism: str = "httpx",
    ):
        self._transport = transport
        self._on_transaction = on_transaction
        self._request_mechanism = request_mechanism

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        transaction = HTTPTransaction(
            request=url_request_from_httpx(request),
            request_mechanism=self._request_mechanism,
        )
        self._on_transaction(transaction)

        started = time.monotonic()
        try:
            response = self._transport.handle_request(request)
        except Exception as e:
            logger.debug(f"[{transaction.transaction_id}] {request.method} {request.url} failed: {e}")
            transaction.mark_failed(e)
            raise

        transaction.record_response(http_response_from_httpx(response), latency=time.monotonic() - started)
        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=RecordingByteStream(response.stream, transaction, started),
            extensions=response.extensions,
        )

    def close(self) -> None:
        self._transport.close()
