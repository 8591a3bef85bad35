"""Built-in message groups."""

from orderguard.translation_sets.validation_messages import (
    VALIDATION_MESSAGE_GROUP,
    validation_messages,
)

BUILTIN_GROUPS = {
    VALIDATION_MESSAGE_GROUP: validation_messages,
}

__all__ = ["BUILTIN_GROUPS", "VALIDATION_MESSAGE_GROUP", "validation_messages"]
