from .payloads import (
    DeleteDocumentPayload,
    DocumentFetchPayload,
    DocumentStorePayload,
    DocumentStoreRequestType,
    QueryFetchPayload,
    SetDataInfo,
    SetDataPayload,
    UpdateDataPayload,
    readable_string_from_request_type,
)
from .references import CollectionReference, DocumentReference, DocumentSnapshot, Initiator, Query
from .transaction import DocumentStoreDirection, DocumentStoreTransaction

__all__ = [
    "CollectionReference",
    "DeleteDocumentPayload",
    "DocumentFetchPayload",
    "DocumentReference",
    "DocumentSnapshot",
    "DocumentStoreDirection",
    "DocumentStorePayload",
    "DocumentStoreRequestType",
    "DocumentStoreTransaction",
    "Initiator",
    "Query",
    "QueryFetchPayload",
    "SetDataInfo",
    "SetDataPayload",
    "UpdateDataPayload",
    "readable_string_from_request_type",
]
