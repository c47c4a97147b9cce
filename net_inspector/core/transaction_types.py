from typing import Annotated, Union

from pydantic import Field, TypeAdapter

from net_inspector.core.document_store import DocumentStoreTransaction
from net_inspector.core.http_transaction import HTTPTransaction
from net_inspector.core.websocket_transaction import WebSocketTransaction

AnyTransaction = Annotated[
    Union[HTTPTransaction, WebSocketTransaction, DocumentStoreTransaction],
    Field(discriminator="kind"),
]

any_transaction_adapter: TypeAdapter[AnyTransaction] = TypeAdapter(AnyTransaction)
