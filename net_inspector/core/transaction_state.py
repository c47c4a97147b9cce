"""Lifecycle states shared by every transaction kind."""

from enum import Enum


class TransactionState(str, Enum):
    """Coarse progress marker of a transaction.

    ``UNSTARTED`` is a sentinel for "no real state assigned yet"; transactions are created in
    ``AWAITING_RESPONSE``.
    """

    UNSTARTED = "unstarted"
    AWAITING_RESPONSE = "awaiting_response"
    RECEIVING_DATA = "receiving_data"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TransactionState.FINISHED, TransactionState.FAILED)


_READABLE_STATES = {
    TransactionState.UNSTARTED: "Unstarted",
    TransactionState.AWAITING_RESPONSE: "Loading",
    TransactionState.RECEIVING_DATA: "Receiving Data",
    TransactionState.FINISHED: "Success",
    TransactionState.FAILED: "Failure",
}


def readable_string_from_transaction_state(state: TransactionState) -> str:
    """Returns the human-readable label shown in status columns for ``state``."""
    return _READABLE_STATES[TransactionState(state)]
