from net_inspector.core.document_store import (
    CollectionReference,
    DocumentReference,
    DocumentSnapshot,
    DocumentStoreDirection,
    DocumentStoreRequestType,
    DocumentStoreTransaction,
    Query,
    SetDataInfo,
    readable_string_from_request_type,
)
from net_inspector.core.http_transaction import HTTPResponse, HTTPTransaction
from net_inspector.core.logging import setup_logging
from net_inspector.core.transaction import (
    DescriptionStyle,
    NetworkTransaction,
    TransactionKind,
    TransactionSnapshot,
)
from net_inspector.core.transaction_state import TransactionState, readable_string_from_transaction_state
from net_inspector.core.transaction_types import AnyTransaction
from net_inspector.core.url_transaction import URLRequest, URLTransaction
from net_inspector.core.websocket_transaction import WebSocketDirection, WebSocketMessage, WebSocketTransaction
from net_inspector.exceptions import NetInspectorError, TransactionContractError

__all__ = [
    "AnyTransaction",
    "CollectionReference",
    "DescriptionStyle",
    "DocumentReference",
    "DocumentSnapshot",
    "DocumentStoreDirection",
    "DocumentStoreRequestType",
    "DocumentStoreTransaction",
    "HTTPResponse",
    "HTTPTransaction",
    "NetInspectorError",
    "NetworkTransaction",
    "Query",
    "SetDataInfo",
    "TransactionContractError",
    "TransactionKind",
    "TransactionSnapshot",
    "TransactionState",
    "URLRequest",
    "URLTransaction",
    "WebSocketDirection",
    "WebSocketMessage",
    "WebSocketTransaction",
    "readable_string_from_request_type",
    "readable_string_from_transaction_state",
    "setup_logging",
]
