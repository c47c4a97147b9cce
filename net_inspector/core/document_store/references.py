"""Value types naming the targets of document-store operations.

Paths are slash-separated and alternate collection and document ids, so a document path has an
even number of segments (``users/42``) and a collection path an odd number (``users``).
"""

from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _split_path(path: str) -> Tuple[str, ...]:
    segments = tuple(segment for segment in path.strip("/").split("/") if segment)
    if not segments:
        raise ValueError("Path must not be empty")
    return segments


class DocumentReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["document"] = "document"
    path: str

    @field_validator("path")
    @classmethod
    def validate_document_path(cls, value: str) -> str:
        segments = _split_path(value)
        if len(segments) % 2:
            raise ValueError(f"Document path must have an even number of segments: {value}")
        return "/".join(segments)

    @property
    def document_id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def parent(self) -> "CollectionReference":
        return CollectionReference(path=self.path.rsplit("/", 1)[0])


class CollectionReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["collection"] = "collection"
    path: str

    @field_validator("path")
    @classmethod
    def validate_collection_path(cls, value: str) -> str:
        segments = _split_path(value)
        if not len(segments) % 2:
            raise ValueError(f"Collection path must have an odd number of segments: {value}")
        return "/".join(segments)

    @property
    def collection_id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(path=f"{self.path}/{document_id}")


class Query(BaseModel):
    """A query over one collection. Filters are opaque, human-readable clauses."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["query"] = "query"
    collection: CollectionReference
    filters: Tuple[str, ...] = ()

    @property
    def path(self) -> str:
        return self.collection.path


Initiator = Annotated[Union[Query, DocumentReference, CollectionReference], Field(discriminator="kind")]


class DocumentSnapshot(BaseModel):
    """A fetched document. ``data`` is None when the document does not exist."""

    model_config = ConfigDict(frozen=True)

    reference: DocumentReference
    data: Optional[Dict[str, Any]] = None

    @property
    def exists(self) -> bool:
        return self.data is not None
