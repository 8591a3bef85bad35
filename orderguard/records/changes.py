"""
OrderGuard Record Changes — the objects a trigger receives and annotates.

Provides:
    - RecordEvent: write events a trigger can be registered for
    - RecordChange: the proposed new state of one record + error side channel
    - RecordTriggerContext: one batch of changes for one object/event
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


class RecordEvent:
    """Enumeration of record write events."""
    BEFORE_INSERT = "before_insert"
    BEFORE_UPDATE = "before_update"
    BEFORE_DELETE = "before_delete"
    AFTER_INSERT = "after_insert"
    AFTER_UPDATE = "after_update"
    AFTER_DELETE = "after_delete"

    ALL = {
        BEFORE_INSERT, BEFORE_UPDATE, BEFORE_DELETE,
        AFTER_INSERT, AFTER_UPDATE, AFTER_DELETE,
    }


class RecordChange:
    """
    One pending write. ``new`` holds the proposed field values, ``old`` the
    stored ones for updates.

    A trigger rejects the write by calling set_error(). Only one error is
    kept; a second call replaces the first.
    """

    def __init__(
        self,
        new: Dict[str, Any],
        old: Optional[Dict[str, Any]] = None,
    ):
        self.new = dict(new)
        self.old = dict(old) if old is not None else None
        self._error: Optional[Tuple[str, Optional[str]]] = None

    def get_value(self, field_name: str, default: Any = None) -> Any:
        return self.new.get(field_name, default)

    def set_error(self, error_code: str, message: Optional[str]) -> None:
        self._error = (error_code, message)

    @property
    def error(self) -> Optional[Tuple[str, Optional[str]]]:
        return self._error

    @property
    def error_code(self) -> Optional[str]:
        return self._error[0] if self._error else None

    @property
    def error_message(self) -> Optional[str]:
        return self._error[1] if self._error else None

    @property
    def has_error(self) -> bool:
        return self._error is not None

    def __repr__(self) -> str:
        status = f"error={self.error_code}" if self._error else "ok"
        return f"<RecordChange({status}) {self.new!r}>"


@dataclass
class RecordTriggerContext:
    """A batch of record changes handed to every trigger for one event."""

    object_name: str
    event: str
    record_changes: List[RecordChange] = field(default_factory=list)
    execution_id: Optional[str] = None

    def get_record_changes(self) -> List[RecordChange]:
        return self.record_changes

    @property
    def rejected(self) -> List[RecordChange]:
        """Changes that carry an error and must not be written."""
        return [c for c in self.record_changes if c.has_error]
