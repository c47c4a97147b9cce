import abc
import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from net_inspector.core.logging import log_transaction_state
from net_inspector.core.transaction_state import TransactionState, readable_string_from_transaction_state
from net_inspector.settings import Settings
from net_inspector.utils import ObservableModel
from net_inspector.utils.formatting import format_timestamp

logger = logging.getLogger(__name__)


class TransactionKind(str, Enum):
    """Discriminant of the concrete transaction kinds."""

    HTTP = "http"
    WEBSOCKET = "websocket"
    DOCUMENT_STORE = "document_store"


class DescriptionStyle(str, Enum):
    """How the inspector should style the primary description line."""

    NORMAL = "normal"
    ERROR = "error"


class TransactionSnapshot(BaseModel):
    """A self-consistent, read-only view of a transaction taken under its lock."""

    model_config = ConfigDict(frozen=True)

    transaction_id: UUID
    kind: TransactionKind
    state: TransactionState
    state_label: str
    start_time: datetime
    primary_description: str
    secondary_description: str
    tertiary_description: str
    copy_string: str
    display_as_error: bool
    received_data_length: int


class NetworkTransaction(ObservableModel, abc.ABC):
    """The shared base class for all kinds of observed network transactions.

    A transaction is created by the collaborator that observed the operation start and is mutated
    in place as the operation progresses. Subclasses supply the description hooks; readers use
    the public properties, which are computed under the instance lock.

    Concrete kinds declare a literal ``kind`` field holding their ``TransactionKind``.
    """

    transaction_id: UUID = Field(default_factory=uuid4, frozen=True)
    start_time: datetime = Field(default_factory=lambda: datetime.now(UTC), frozen=True)
    state: TransactionState = Field(default=TransactionState.AWAITING_RESPONSE)
    error: Optional[BaseException] = Field(default=None)
    received_data_length: int = Field(default=0, ge=0)
    # A small preview image of the transaction's payload, assigned by the collaborator
    thumbnail: Optional[bytes] = Field(default=None)

    # --- Lifecycle ---

    def mark_receiving_data(self, received_data_length: Optional[int] = None) -> None:
        changes: dict[str, Any] = {"state": TransactionState.RECEIVING_DATA}
        if received_data_length is not None:
            changes["received_data_length"] = received_data_length
        self.update_fields(**changes)

    def mark_finished(self) -> None:
        self.update_fields(state=TransactionState.FINISHED)

    def mark_failed(self, error: Optional[BaseException] = None) -> None:
        """Moves to FAILED. ``error`` is kept only when given; an existing error is not cleared."""
        if error is None:
            self.update_fields(state=TransactionState.FAILED)
        else:
            self.update_fields(error=error, state=TransactionState.FAILED)

    def update_fields(self, **changes: Any) -> List[str]:
        # State goes last so data recorded alongside a terminal transition is kept
        ordered = dict(sorted(changes.items(), key=lambda item: item[0] == "state"))
        return super().update_fields(**ordered)

    def _accept_assignment(self, name: str, current: Any, value: Any) -> bool:
        if name == "state":
            return self._accept_state(current, value)
        if name == "received_data_length":
            return self._accept_received_data_length(current, value)
        return True

    def _accept_state(self, current: TransactionState, value: Any) -> bool:
        try:
            new_state = TransactionState(value)
        except ValueError:
            # Let validation report the bad value
            return True
        leaves_terminal = current.is_terminal and not new_state.is_terminal
        # FAILED is final; only FINISHED may still be superseded by a late failure
        clears_failure = current == TransactionState.FAILED and new_state != TransactionState.FAILED
        if leaves_terminal or clears_failure:
            logger.warning(
                f"[{self.transaction_id}] Ignoring transition from terminal state {current.value} to {new_state.value}"
            )
            return False
        if new_state != current:
            log_transaction_state(
                str(self.transaction_id),
                new_state.value,
                {"kind": self.kind, "previous_state": current.value},
            )
        return True

    def _accept_received_data_length(self, current: int, value: Any) -> bool:
        if self.state.is_terminal:
            logger.warning(f"[{self.transaction_id}] Ignoring received data length change after {self.state.value}")
            return False
        if isinstance(value, int) and value < current:
            logger.warning(f"[{self.transaction_id}] Ignoring decrease of received data length {current} -> {value}")
            return False
        return True

    # --- Derived, read-only ---

    @property
    def state_label(self) -> str:
        return readable_string_from_transaction_state(self.state)

    @property
    def primary_description(self) -> str:
        """The most prominent line, typically an endpoint or path. Styled as an error when
        ``display_as_error`` is true."""
        with self._lock:
            return self._primary_description()

    @property
    def secondary_description(self) -> str:
        """Something less important, such as a payload preview or the URL's host."""
        with self._lock:
            return self._secondary_description()

    @property
    def tertiary_description(self) -> str:
        """Minor details such as method, status, timestamp or duration."""
        with self._lock:
            return self._tertiary_description()

    @property
    def copy_string(self) -> str:
        """The text to copy when the user selects the "copy" action."""
        with self._lock:
            return self._copy_string()

    @property
    def display_as_error(self) -> bool:
        """The single flag the presentation layer trusts for error styling. Never cached."""
        with self._lock:
            return self._is_error()

    @property
    def description_style(self) -> DescriptionStyle:
        return DescriptionStyle.ERROR if self.display_as_error else DescriptionStyle.NORMAL

    def matches_query(self, filter_string: str) -> bool:
        """Whether this transaction should show up when the user searches for ``filter_string``."""
        needle = filter_string.strip().casefold()
        if not needle:
            return True
        with self._lock:
            haystacks = self._searchable_strings()
        return any(needle in haystack.casefold() for haystack in haystacks if haystack)

    def snapshot(self) -> TransactionSnapshot:
        with self._lock:
            return TransactionSnapshot(
                transaction_id=self.transaction_id,
                kind=self.kind,
                state=self.state,
                state_label=self.state_label,
                start_time=self.start_time,
                primary_description=self._primary_description(),
                secondary_description=self._secondary_description(),
                tertiary_description=self._tertiary_description(),
                copy_string=self._copy_string(),
                display_as_error=self._is_error(),
                received_data_length=self.received_data_length,
            )

    def _formatted_start_time(self) -> str:
        return format_timestamp(self.start_time, Settings().get_timestamp_format())

    # --- Hooks for subclasses, called with the lock held ---

    @abc.abstractmethod
    def _primary_description(self) -> str: ...

    @abc.abstractmethod
    def _secondary_description(self) -> str: ...

    @abc.abstractmethod
    def _tertiary_description(self) -> str: ...

    @abc.abstractmethod
    def _copy_string(self) -> str: ...

    def _is_error(self) -> bool:
        return self.state == TransactionState.FAILED

    def _searchable_strings(self) -> List[str]:
        return [self._primary_description(), self._secondary_description(), self._copy_string()]
