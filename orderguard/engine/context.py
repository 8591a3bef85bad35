"""
OrderGuard Execution Context — per-invocation state held in a ContextVar.

Carries the acting user, the preferred language used to resolve message
groups, and the execution_id stamped on every log entry.

Usage:
    from orderguard.engine.context import (
        ExecutionContext,
        set_execution_context,
        get_execution_context,
        get_preferred_language,
    )
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

current_execution_context: ContextVar[Optional["ExecutionContext"]] = ContextVar(
    "execution_context", default=None
)


@dataclass
class ExecutionContext:
    """Per-invocation execution context."""

    user_id: Optional[int] = None
    username: str = "system"
    preferred_language: str = "en"
    execution_id: str = field(default_factory=lambda: f"exec_{uuid.uuid4().hex[:12]}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging."""
        return {
            "user_id": self.user_id,
            "username": self.username,
            "preferred_language": self.preferred_language,
            "execution_id": self.execution_id,
        }


def set_execution_context(ctx: ExecutionContext) -> None:
    """Set the execution context for the current thread/task."""
    current_execution_context.set(ctx)


def get_execution_context() -> Optional[ExecutionContext]:
    """Get the current execution context. Returns None if not set."""
    return current_execution_context.get()


def clear_execution_context() -> None:
    current_execution_context.set(None)


def get_preferred_language(default: str = "en") -> str:
    """
    Get the active user's preferred language.

    Resolution chain:
    1. preferred_language from the current ExecutionContext
    2. ``default`` (the configured platform language, "en" if unset)
    """
    ctx = get_execution_context()
    if ctx and ctx.preferred_language:
        return ctx.preferred_language
    return default


def resolve_translation(
    translations_data: Dict[str, Dict[str, str]],
    key: str,
    lang: str,
    default_lang: str = "en",
) -> Optional[str]:
    """
    Resolve a single message key.

    Fallback chain:
    1. ``lang``
    2. ``default_lang``
    3. "en"

    Returns None when the key is missing or has no text in any of them.
    """
    key_translations = translations_data.get(key)
    if not key_translations:
        return None

    for candidate in (lang, default_lang, "en"):
        text = key_translations.get(candidate)
        if text is not None:
            return text
    return None
