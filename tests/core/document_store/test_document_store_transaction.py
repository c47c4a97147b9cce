from unittest.mock import Mock

import pytest
from net_inspector.core.document_store import (
    CollectionReference,
    DeleteDocumentPayload,
    DocumentReference,
    DocumentSnapshot,
    DocumentStoreDirection,
    DocumentStoreRequestType,
    DocumentStoreTransaction,
    Query,
    QueryFetchPayload,
    SetDataInfo,
    SetDataPayload,
)
from net_inspector.core.transaction import TransactionKind
from net_inspector.core.transaction_state import TransactionState
from net_inspector.exceptions import TransactionContractError
from pydantic import ValidationError


@pytest.fixture
def user_doc():
    return DocumentReference(path="users/42")


@pytest.fixture
def users_query():
    return Query(collection=CollectionReference(path="users"), filters=("country == 'NZ'",))


def _snapshot(path: str, **data) -> DocumentSnapshot:
    return DocumentSnapshot(reference=DocumentReference(path=path), data=data)


# --- Factories ---


def test_delete_document(user_doc):
    transaction = DocumentStoreTransaction.delete_document(user_doc)

    assert transaction.kind == TransactionKind.DOCUMENT_STORE
    assert transaction.direction == DocumentStoreDirection.PUSH
    assert transaction.request_type == DocumentStoreRequestType.DELETE_DOCUMENT
    assert transaction.path == "users/42"
    assert transaction.documents is None
    assert transaction.set_data_info is None
    assert transaction.updated_data is None
    assert transaction.state == TransactionState.AWAITING_RESPONSE


def test_query_fetch(users_query):
    transaction = DocumentStoreTransaction.query_fetch(users_query)

    assert transaction.direction == DocumentStoreDirection.PULL
    assert transaction.request_type == DocumentStoreRequestType.FETCH_QUERY
    assert transaction.initiator_query == users_query
    assert transaction.initiator_doc is None
    assert transaction.initiator_collection is None
    assert transaction.path == "users"
    assert transaction.documents is None
    assert transaction.set_data_info is None
    assert transaction.updated_data is None


def test_query_fetch_on_collection():
    collection = CollectionReference(path="users/42/orders")
    transaction = DocumentStoreTransaction.query_fetch(collection)

    assert transaction.initiator_collection == collection
    assert transaction.initiator_query is None
    assert transaction.initiator_doc is None
    assert transaction.path == "users/42/orders"


def test_document_fetch(user_doc):
    transaction = DocumentStoreTransaction.document_fetch(user_doc)

    assert transaction.direction == DocumentStoreDirection.PULL
    assert transaction.request_type == DocumentStoreRequestType.FETCH_DOCUMENT
    assert transaction.initiator_doc == user_doc
    assert transaction.initiator_query is None
    assert transaction.initiator_collection is None


def test_set_data_with_merge(user_doc):
    transaction = DocumentStoreTransaction.set_data(user_doc, {"name": "Ada"}, merge=True)

    info = transaction.set_data_info
    assert transaction.direction == DocumentStoreDirection.PUSH
    assert transaction.request_type == DocumentStoreRequestType.SET_DATA
    assert info.document_data == {"name": "Ada"}
    assert info.merge is True
    assert info.merge_fields is None
    assert transaction.documents is None
    assert transaction.updated_data is None


def test_set_data_with_merge_fields(user_doc):
    transaction = DocumentStoreTransaction.set_data(user_doc, {"name": "Ada"}, merge_fields=["name"])

    assert transaction.set_data_info.merge is None
    assert transaction.set_data_info.merge_fields == ("name",)


def test_set_data_without_merge_options_replaces(user_doc):
    transaction = DocumentStoreTransaction.set_data(user_doc, {"name": "Ada"})

    assert transaction.set_data_info.merge is False
    assert transaction.set_data_info.merge_fields is None


def test_set_data_rejects_both_merge_options(user_doc):
    with pytest.raises(TransactionContractError, match="not both") as exc_info:
        DocumentStoreTransaction.set_data(user_doc, {}, merge=True, merge_fields=["name"])
    assert exc_info.value.transaction_kind == "document_store"


def test_update_data(user_doc):
    transaction = DocumentStoreTransaction.update_data(user_doc, {"visits": 3})

    assert transaction.direction == DocumentStoreDirection.PUSH
    assert transaction.request_type == DocumentStoreRequestType.UPDATE_DATA
    assert transaction.updated_data == {"visits": 3}
    assert transaction.set_data_info is None
    assert transaction.documents is None


@pytest.mark.parametrize(
    "factory",
    [
        DocumentStoreTransaction.document_fetch,
        DocumentStoreTransaction.delete_document,
        lambda initiator: DocumentStoreTransaction.update_data(initiator, {}),
        lambda initiator: DocumentStoreTransaction.set_data(initiator, {}),
    ],
)
def test_document_factories_reject_query_initiator(factory, users_query):
    with pytest.raises(TransactionContractError):
        factory(users_query)


def test_query_fetch_rejects_document_initiator(user_doc):
    with pytest.raises(TransactionContractError, match="Query Fetch requires"):
        DocumentStoreTransaction.query_fetch(user_doc)


def test_factories_reject_missing_initiator():
    with pytest.raises(TransactionContractError):
        DocumentStoreTransaction.delete_document(None)  # type: ignore[arg-type]


def test_direct_construction_validates_initiator(users_query):
    with pytest.raises(ValidationError):
        DocumentStoreTransaction(initiator=users_query, payload=DeleteDocumentPayload())


def test_direct_construction_from_plain_data():
    transaction = DocumentStoreTransaction(
        initiator={"kind": "collection", "path": "users"},
        payload={"request_type": "fetch_query"},
    )
    assert isinstance(transaction.initiator, CollectionReference)
    assert isinstance(transaction.payload, QueryFetchPayload)


def test_initiator_is_immutable(user_doc):
    transaction = DocumentStoreTransaction.delete_document(user_doc)
    with pytest.raises(ValidationError):
        transaction.initiator = DocumentReference(path="users/43")


@pytest.mark.parametrize(
    "payload",
    [
        SetDataPayload(info=SetDataInfo(document_data={"name": "Ada"}, merge=True)),
        {"request_type": "update_data", "data": {"visits": 1}},
    ],
)
def test_request_type_is_fixed_after_creation(user_doc, payload):
    transaction = DocumentStoreTransaction.delete_document(user_doc)

    with pytest.raises(TransactionContractError, match="Cannot change a delete_document transaction"):
        transaction.payload = payload

    assert transaction.request_type == DocumentStoreRequestType.DELETE_DOCUMENT
    assert transaction.direction == DocumentStoreDirection.PUSH
    assert transaction.set_data_info is None


# --- Fetched documents ---


def test_query_fetch_records_documents_then_finishes(users_query):
    transaction = DocumentStoreTransaction.query_fetch(users_query)
    mock_handler = Mock()
    transaction.changed.connect(mock_handler)
    documents = [_snapshot("users/1", name="Ada"), _snapshot("users/2", name="Grace")]

    transaction.record_documents(documents)
    transaction.mark_finished()

    assert transaction.documents == tuple(documents)
    assert transaction.request_type == DocumentStoreRequestType.FETCH_QUERY
    assert transaction.state == TransactionState.FINISHED
    assert [info.signal.name for (info,), _ in mock_handler.call_args_list] == ["payload", "state"]


def test_document_fetch_records_single_or_no_document(user_doc):
    found = DocumentStoreTransaction.document_fetch(user_doc)
    found.record_documents([_snapshot("users/42", name="Ada")])
    assert len(found.documents) == 1

    missing = DocumentStoreTransaction.document_fetch(user_doc)
    missing.record_documents([])
    assert missing.documents == ()


def test_document_fetch_rejects_multiple_documents(user_doc):
    transaction = DocumentStoreTransaction.document_fetch(user_doc)
    with pytest.raises(ValidationError):
        transaction.record_documents([_snapshot("users/42"), _snapshot("users/43")])
    assert transaction.documents is None


def test_documents_are_recorded_once(users_query):
    transaction = DocumentStoreTransaction.query_fetch(users_query)
    transaction.record_documents([])

    with pytest.raises(TransactionContractError, match="already recorded"):
        transaction.record_documents([_snapshot("users/1")])


def test_documents_rejected_for_non_fetch_kinds(user_doc):
    transaction = DocumentStoreTransaction.update_data(user_doc, {"visits": 3})

    with pytest.raises(TransactionContractError):
        transaction.record_documents([])
    assert transaction.documents is None


@pytest.mark.parametrize("finish", ["mark_finished", "mark_failed"])
def test_documents_rejected_after_terminal_state(users_query, finish):
    transaction = DocumentStoreTransaction.query_fetch(users_query)
    getattr(transaction, finish)()

    with pytest.raises(TransactionContractError, match="after the transaction is"):
        transaction.record_documents([_snapshot("users/1")])
    assert transaction.documents is None


# --- Descriptions ---


def test_descriptions(user_doc, start_time, monkeypatch):
    monkeypatch.setenv("NET_INSPECTOR_TIMESTAMP_FORMAT", "%Y")
    transaction = DocumentStoreTransaction(
        initiator=user_doc, payload={"request_type": "delete_document"}, start_time=start_time
    )

    assert transaction.primary_description == "users/42"
    assert transaction.secondary_description == "Delete Document · Push"
    assert transaction.tertiary_description == "Loading · 2024"

    transaction.mark_finished()
    assert transaction.tertiary_description == "Success · 2024"


def test_copy_string_includes_written_data(user_doc):
    transaction = DocumentStoreTransaction.set_data(user_doc, {"name": "Ada", "age": 36}, merge=True)
    assert transaction.copy_string == 'Set Data users/42 {"age": 36, "name": "Ada"}'


def test_copy_string_for_fetch(users_query):
    assert DocumentStoreTransaction.query_fetch(users_query).copy_string == "Query Fetch users"


def test_display_as_error_only_when_failed(user_doc):
    transaction = DocumentStoreTransaction.delete_document(user_doc)
    transaction.error = PermissionError("missing permissions")
    assert transaction.display_as_error is False

    transaction.mark_failed()
    assert transaction.display_as_error is True


def test_matches_query(users_query):
    transaction = DocumentStoreTransaction.query_fetch(users_query)

    assert transaction.matches_query("USERS")
    assert transaction.matches_query("query fetch")
    assert transaction.matches_query("nz")
    assert not transaction.matches_query("orders")
