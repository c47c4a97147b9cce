class NetInspectorError(Exception):
    """Base exception for all net_inspector errors."""

    pass


class TransactionContractError(NetInspectorError, ValueError):
    """Raised when a transaction is constructed or driven in a way its kind does not allow.

    Inherits from ValueError since these are always caused by a bad argument from the
    collaborator that owns the transaction.
    """

    def __init__(self, *args, transaction_kind: str | None = None, detail: str | None = None):
        super().__init__(*args)
        self.transaction_kind = transaction_kind
        self.detail = detail or (args[0] if args else None)
