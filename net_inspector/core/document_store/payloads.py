"""Operation-specific payloads, one variant per request type."""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from net_inspector.core.document_store.references import DocumentSnapshot


class DocumentStoreRequestType(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    FETCH_QUERY = "fetch_query"
    FETCH_DOCUMENT = "fetch_document"
    SET_DATA = "set_data"
    UPDATE_DATA = "update_data"
    DELETE_DOCUMENT = "delete_document"


_READABLE_REQUEST_TYPES = {
    DocumentStoreRequestType.NOT_APPLICABLE: "Not Firebase",
    DocumentStoreRequestType.FETCH_QUERY: "Query Fetch",
    DocumentStoreRequestType.FETCH_DOCUMENT: "Document Fetch",
    DocumentStoreRequestType.SET_DATA: "Set Data",
    DocumentStoreRequestType.UPDATE_DATA: "Update Data",
    DocumentStoreRequestType.DELETE_DOCUMENT: "Delete Document",
}


def readable_string_from_request_type(request_type: DocumentStoreRequestType) -> str:
    return _READABLE_REQUEST_TYPES[DocumentStoreRequestType(request_type)]


class SetDataInfo(BaseModel):
    """The data written by a set-data operation and how it merges with existing data.

    Exactly one of ``merge`` and ``merge_fields`` is populated.
    """

    model_config = ConfigDict(frozen=True)

    document_data: Dict[str, Any]
    merge: Optional[bool] = None
    merge_fields: Optional[Tuple[str, ...]] = None

    @model_validator(mode="after")
    def validate_merge_semantics(self):
        if self.merge is not None and self.merge_fields is not None:
            raise ValueError("SetDataInfo cannot have both merge and merge_fields")
        if self.merge is None and self.merge_fields is None:
            raise ValueError("SetDataInfo must have either merge or merge_fields")
        return self


class QueryFetchPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_type: Literal["fetch_query"] = DocumentStoreRequestType.FETCH_QUERY.value
    # None until results arrive
    documents: Optional[Tuple[DocumentSnapshot, ...]] = None


class DocumentFetchPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_type: Literal["fetch_document"] = DocumentStoreRequestType.FETCH_DOCUMENT.value
    documents: Optional[Tuple[DocumentSnapshot, ...]] = None

    @field_validator("documents")
    @classmethod
    def validate_single_document(cls, value):
        if value is not None and len(value) > 1:
            raise ValueError("A document fetch yields at most one document")
        return value


class SetDataPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_type: Literal["set_data"] = DocumentStoreRequestType.SET_DATA.value
    info: SetDataInfo


class UpdateDataPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_type: Literal["update_data"] = DocumentStoreRequestType.UPDATE_DATA.value
    data: Dict[str, Any]


class DeleteDocumentPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_type: Literal["delete_document"] = DocumentStoreRequestType.DELETE_DOCUMENT.value


FetchPayload = Union[QueryFetchPayload, DocumentFetchPayload]

DocumentStorePayload = Annotated[
    Union[QueryFetchPayload, DocumentFetchPayload, SetDataPayload, UpdateDataPayload, DeleteDocumentPayload],
    Field(discriminator="request_type"),
]
