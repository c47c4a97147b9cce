import threading
from contextlib import contextmanager
from typing import Any, ClassVar, Iterator, List

from psygnal import EmissionInfo, EventedModel, Signal
from pydantic import ConfigDict, PrivateAttr


class ObservableModel(EventedModel):
    """A psygnal EventedModel whose field assignments are serialized by a per-instance lock.

    Every assignment to a model field goes through ``update_fields``, which:

    * holds the instance's re-entrant lock while validating and storing the values, so a reader
      that takes the same lock (see ``locked``) never sees half of a multi-field update;
    * gives subclasses a chance to refuse an assignment via ``_accept_assignment``;
    * holds back ``changed`` until the whole update is applied and the lock is released.

    Attributes:
        changed: A signal emitted once per field whose value actually changed. Slots receive the
                 ``EmissionInfo`` of the field's own signal; ``info.signal.name`` is the field name
                 and ``info.args[0]`` its new value.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)
    changed: ClassVar[Signal] = Signal(EmissionInfo)

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        # EventedModel.__init__ installs a fresh event group once validation is done.
        # Every field signal of that group is relayed to `changed`.
        self.events.connect(self.changed)

    def model_post_init(self, context: Any, /) -> None:
        # Validation through a TypeAdapter or model_validate never reaches __init__
        if not hasattr(self, "_events"):
            self._events = self.__signal_group__(self)
            self.events.connect(self.changed)

    @contextmanager
    def locked(self) -> Iterator["ObservableModel"]:
        """Hold the instance lock for a consistent multi-field read."""
        with self._lock:
            yield self

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__class__.model_fields:
            self.update_fields(**{name: value})
        else:
            super().__setattr__(name, value)

    def update_fields(self, **changes: Any) -> List[str]:
        """Assign several fields as one atomic step.

        Returns:
            The names of the fields whose values changed.
        """
        changed_fields = []
        with self.changed.paused():
            with self._lock:
                for name, value in changes.items():
                    if self._assign(name, value):
                        changed_fields.append(name)
        return changed_fields

    def _assign(self, name: str, value: Any) -> bool:
        current = getattr(self, name, None)
        if not self._accept_assignment(name, current, value):
            return False
        super().__setattr__(name, value)
        return getattr(self, name) != current

    def _accept_assignment(self, name: str, current: Any, value: Any) -> bool:
        """Subclasses return False to leave ``name`` untouched. Called with the lock held."""
        return True
