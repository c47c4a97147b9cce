import json
import logging
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from pydantic import Field, model_validator

from net_inspector.core.document_store.payloads import (
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
from net_inspector.core.document_store.references import (
    CollectionReference,
    DocumentReference,
    DocumentSnapshot,
    Initiator,
    Query,
)
from net_inspector.core.transaction import NetworkTransaction, TransactionKind
from net_inspector.exceptions import TransactionContractError
from net_inspector.utils.formatting import join_description

logger = logging.getLogger(__name__)


class DocumentStoreDirection(str, Enum):
    NONE = "none"
    PUSH = "push"
    PULL = "pull"

    @property
    def label(self) -> str:
        return "" if self is DocumentStoreDirection.NONE else self.value.capitalize()


_DIRECTIONS = {
    DocumentStoreRequestType.NOT_APPLICABLE: DocumentStoreDirection.NONE,
    DocumentStoreRequestType.FETCH_QUERY: DocumentStoreDirection.PULL,
    DocumentStoreRequestType.FETCH_DOCUMENT: DocumentStoreDirection.PULL,
    DocumentStoreRequestType.SET_DATA: DocumentStoreDirection.PUSH,
    DocumentStoreRequestType.UPDATE_DATA: DocumentStoreDirection.PUSH,
    DocumentStoreRequestType.DELETE_DOCUMENT: DocumentStoreDirection.PUSH,
}

_FETCH_PAYLOADS = (QueryFetchPayload, DocumentFetchPayload)


def _allowed_initiators(request_type: DocumentStoreRequestType) -> Tuple[type, ...]:
    if request_type == DocumentStoreRequestType.FETCH_QUERY:
        return (Query, CollectionReference)
    return (DocumentReference,)


class DocumentStoreTransaction(NetworkTransaction):
    """A structured operation against a hierarchical document store.

    Build instances with one of the factories (``query_fetch``, ``document_fetch``, ``set_data``,
    ``update_data``, ``delete_document``). The payload variant fixes the request type, so the
    payload accessors that do not apply to it always return None.
    """

    kind: Literal["document_store"] = Field(default=TransactionKind.DOCUMENT_STORE.value, frozen=True)
    initiator: Initiator = Field(frozen=True)
    payload: DocumentStorePayload

    @model_validator(mode="after")
    def validate_initiator_matches_request_type(self):
        allowed = _allowed_initiators(self.payload.request_type)
        if not isinstance(self.initiator, allowed):
            raise ValueError(
                f"{readable_string_from_request_type(self.payload.request_type)} cannot be initiated by "
                f"a {self.initiator.kind}"
            )
        return self

    # --- Factories ---

    @classmethod
    def query_fetch(cls, initiator: Query | CollectionReference) -> "DocumentStoreTransaction":
        return cls._create(initiator, QueryFetchPayload())

    @classmethod
    def document_fetch(cls, initiator: DocumentReference) -> "DocumentStoreTransaction":
        return cls._create(initiator, DocumentFetchPayload())

    @classmethod
    def set_data(
        cls,
        initiator: DocumentReference,
        data: Dict[str, Any],
        merge: Optional[bool] = None,
        merge_fields: Optional[Sequence[str]] = None,
    ) -> "DocumentStoreTransaction":
        """Records a set-data call. Without either merge option the write replaces the document."""
        if merge is not None and merge_fields is not None:
            raise TransactionContractError(
                "set_data accepts either merge or merge_fields, not both",
                transaction_kind=TransactionKind.DOCUMENT_STORE.value,
            )
        if merge is None and merge_fields is None:
            merge = False
        info = SetDataInfo(
            document_data=data,
            merge=merge,
            merge_fields=tuple(merge_fields) if merge_fields is not None else None,
        )
        return cls._create(initiator, SetDataPayload(info=info))

    @classmethod
    def update_data(cls, initiator: DocumentReference, data: Dict[str, Any]) -> "DocumentStoreTransaction":
        return cls._create(initiator, UpdateDataPayload(data=data))

    @classmethod
    def delete_document(cls, initiator: DocumentReference) -> "DocumentStoreTransaction":
        return cls._create(initiator, DeleteDocumentPayload())

    @classmethod
    def _create(cls, initiator: Any, payload: Any) -> "DocumentStoreTransaction":
        allowed = _allowed_initiators(payload.request_type)
        if not isinstance(initiator, allowed):
            raise TransactionContractError(
                f"{readable_string_from_request_type(payload.request_type)} requires one of "
                f"{', '.join(t.__name__ for t in allowed)}, got {type(initiator).__name__}",
                transaction_kind=TransactionKind.DOCUMENT_STORE.value,
            )
        transaction = cls(initiator=initiator, payload=payload)
        logger.debug(
            f"[{transaction.transaction_id}] Created {payload.request_type} transaction for {initiator.path}"
        )
        return transaction

    # --- Lifecycle ---

    def record_documents(self, documents: Sequence[DocumentSnapshot]) -> None:
        """Stores the fetched documents. Only valid once, only for the fetch kinds, and only
        before the transaction finishes or fails."""
        with self._lock:
            payload = self.payload
            if self.state.is_terminal:
                raise TransactionContractError(
                    f"Cannot record documents after the transaction is {self.state.value}",
                    transaction_kind=self.kind,
                )
            if not isinstance(payload, _FETCH_PAYLOADS):
                raise TransactionContractError(
                    f"Cannot record documents on a {payload.request_type} transaction",
                    transaction_kind=self.kind,
                )
            if payload.documents is not None:
                raise TransactionContractError(
                    "Documents were already recorded for this transaction",
                    transaction_kind=self.kind,
                )
            self.payload = type(payload)(documents=tuple(documents))

    def _accept_assignment(self, name: str, current: Any, value: Any) -> bool:
        if name == "payload":
            if isinstance(value, dict):
                request_type = value.get("request_type")
            else:
                request_type = getattr(value, "request_type", None)
            if request_type != current.request_type:
                raise TransactionContractError(
                    f"Cannot change a {current.request_type} transaction into {request_type}",
                    transaction_kind=self.kind,
                )
        return super()._accept_assignment(name, current, value)

    # --- Accessors ---

    @property
    def request_type(self) -> DocumentStoreRequestType:
        return DocumentStoreRequestType(self.payload.request_type)

    @property
    def direction(self) -> DocumentStoreDirection:
        return _DIRECTIONS[self.request_type]

    @property
    def initiator_query(self) -> Optional[Query]:
        return self.initiator if isinstance(self.initiator, Query) else None

    @property
    def initiator_doc(self) -> Optional[DocumentReference]:
        return self.initiator if isinstance(self.initiator, DocumentReference) else None

    @property
    def initiator_collection(self) -> Optional[CollectionReference]:
        return self.initiator if isinstance(self.initiator, CollectionReference) else None

    @property
    def path(self) -> str:
        return self.initiator.path

    @property
    def documents(self) -> Optional[Tuple[DocumentSnapshot, ...]]:
        payload = self.payload
        return payload.documents if isinstance(payload, _FETCH_PAYLOADS) else None

    @property
    def set_data_info(self) -> Optional[SetDataInfo]:
        payload = self.payload
        return payload.info if isinstance(payload, SetDataPayload) else None

    @property
    def updated_data(self) -> Optional[Dict[str, Any]]:
        payload = self.payload
        return payload.data if isinstance(payload, UpdateDataPayload) else None

    # --- Descriptions ---

    def _request_type_label(self) -> str:
        return readable_string_from_request_type(self.request_type)

    def _written_data(self) -> Optional[Dict[str, Any]]:
        info = self.set_data_info
        if info is not None:
            return info.document_data
        return self.updated_data

    def _primary_description(self) -> str:
        return self.path

    def _secondary_description(self) -> str:
        return join_description(self._request_type_label(), self.direction.label)

    def _tertiary_description(self) -> str:
        return join_description(self.state_label, self._formatted_start_time())

    def _copy_string(self) -> str:
        copy_string = f"{self._request_type_label()} {self.path}"
        data = self._written_data()
        if data is not None:
            copy_string += " " + json.dumps(data, sort_keys=True, default=str)
        return copy_string

    def _searchable_strings(self) -> List[str]:
        strings = super()._searchable_strings()
        query = self.initiator_query
        if query is not None:
            strings.extend(query.filters)
        return strings
