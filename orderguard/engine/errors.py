"""
OrderGuard Error Hierarchy — Structured exceptions for the trigger runtime.

These are host failures, not validation outcomes. A rejected order is never
an exception: the rule attaches an error code + message to the RecordChange
and the write is aborted by the caller. The exceptions below cover broken
configuration, failing collaborators and misbehaving triggers.

Hierarchy:
    OrderGuardError
    ├── OrderGuardConfigError          — Invalid orderguard.yaml / handler path
    ├── OrderGuardObjectNotFoundError  — Trigger not found in registry
    ├── OrderGuardQueryError           — Catalog query failed
    ├── OrderGuardTranslationError     — Message group missing
    └── OrderGuardTriggerError         — Trigger raised during execution
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class OrderGuardError(Exception):
    """
    Base error for all OrderGuard runtime failures.
    All context is serializable to JSON for the execution log.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.execution_id: Optional[str] = context.get("execution_id")
        self.object_ref: Optional[str] = context.get("object_ref")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "execution_id": self.execution_id,
            "object_ref": self.object_ref,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k not in ("execution_id", "object_ref")
            },
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.object_ref:
            parts.append(f"object_ref={self.object_ref}")
        if self.execution_id:
            parts.append(f"execution_id={self.execution_id}")
        return " | ".join(parts)


class OrderGuardConfigError(OrderGuardError):
    """Configuration error — invalid orderguard.yaml or trigger definition."""
    pass


class OrderGuardObjectNotFoundError(OrderGuardError):
    """Trigger name not found in the registry."""
    pass


class OrderGuardQueryError(OrderGuardError):
    """Catalog query failed at the database layer."""

    def __init__(self, message: str, **context: Any):
        self.product_name: Optional[str] = context.get("product_name")
        self.manufacturer_name: Optional[str] = context.get("manufacturer_name")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["product_name"] = self.product_name
        d["manufacturer_name"] = self.manufacturer_name
        return d


class OrderGuardTranslationError(OrderGuardError):
    """Requested message group is not registered."""

    def __init__(self, message: str, **context: Any):
        self.group: Optional[str] = context.get("group")
        super().__init__(message, **context)


class OrderGuardTriggerError(OrderGuardError):
    """
    A trigger raised while processing a batch. The whole invocation fails;
    the original exception is chained as __cause__.
    """

    def __init__(self, message: str, **context: Any):
        self.object_name: Optional[str] = context.get("object_name")
        self.event: Optional[str] = context.get("event")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["object_name"] = self.object_name
        d["event"] = self.event
        return d
