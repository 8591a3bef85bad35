"""
OrderGuard Trigger Registry — explicit registration of record triggers.

Triggers are registered from configuration at startup (object name, event
set, order) rather than discovered by scanning modules. Lookup returns the
triggers for one object/event in execution order.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from orderguard.engine.errors import OrderGuardConfigError, OrderGuardObjectNotFoundError

logger = logging.getLogger("orderguard.engine.registry")


@dataclass
class TriggerDefinition:
    """Metadata for a registered record trigger."""

    name: str                  # e.g., "order_stock_validation"
    object_name: str           # e.g., "bicycle_order"
    events: Set[str]           # e.g., {"before_insert", "before_update"}
    order: int = 1             # Lower = runs first
    handler_path: str = ""     # "module:attribute"
    handler: Optional[Any] = None  # class or factory called with TriggerServices
    enabled: bool = True
    sequence: int = field(default=0, compare=False)

    def handles(self, object_name: str, event: str) -> bool:
        return self.enabled and self.object_name == object_name and event in self.events


def import_handler(handler_path: str) -> Any:
    """Resolve "package.module:attribute" to the attribute."""
    module_path, _, attr = handler_path.partition(":")
    if not module_path or not attr:
        raise OrderGuardConfigError(
            f"Invalid handler path: {handler_path}", handler=handler_path
        )
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise OrderGuardConfigError(
            f"Cannot import trigger module '{module_path}': {e}",
            handler=handler_path,
        ) from e
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise OrderGuardConfigError(
            f"Module '{module_path}' has no attribute '{attr}'",
            handler=handler_path,
        ) from e


class TriggerRegistry:
    """
    In-memory trigger registry keyed by trigger name.

    Usage:
        registry = TriggerRegistry()
        registry.register_from_config(config.triggers)
        for trigger in registry.get_for("bicycle_order", "before_insert"):
            ...
    """

    def __init__(self):
        self._triggers: Dict[str, TriggerDefinition] = {}
        self._sequence = 0

    def register(self, trigger: TriggerDefinition) -> None:
        """Register a trigger. Re-registering a name replaces it."""
        if trigger.handler is None:
            if not trigger.handler_path:
                raise OrderGuardConfigError(
                    f"Trigger '{trigger.name}' has no handler",
                    object_ref=trigger.name,
                )
            trigger.handler = import_handler(trigger.handler_path)

        self._sequence += 1
        trigger.sequence = self._sequence
        self._triggers[trigger.name] = trigger
        logger.debug(
            f"Registered trigger: {trigger.name} on {trigger.object_name} "
            f"{sorted(trigger.events)} order={trigger.order}"
        )

    def register_from_config(self, configs: Iterable[Any]) -> int:
        """
        Register every TriggerConfig from orderguard.yaml.

        Returns:
            Number of triggers registered.
        """
        count = 0
        for cfg in configs:
            self.register(TriggerDefinition(
                name=cfg.name,
                object_name=cfg.object,
                events=set(cfg.events),
                order=cfg.order,
                handler_path=cfg.handler,
                enabled=cfg.enabled,
            ))
            count += 1
        logger.info(f"Registered {count} trigger(s) from configuration")
        return count

    def unregister(self, name: str) -> None:
        self._triggers.pop(name, None)

    def resolve(self, name: str) -> Optional[TriggerDefinition]:
        return self._triggers.get(name)

    def resolve_or_raise(self, name: str) -> TriggerDefinition:
        trigger = self.resolve(name)
        if trigger is None:
            raise OrderGuardObjectNotFoundError(
                f"Trigger not found: {name}",
                object_ref=name,
            )
        return trigger

    def get_for(self, object_name: str, event: str) -> List[TriggerDefinition]:
        """Enabled triggers for an object/event, by order then registration."""
        matching = [t for t in self._triggers.values() if t.handles(object_name, event)]
        return sorted(matching, key=lambda t: (t.order, t.sequence))

    def get_all(self) -> List[TriggerDefinition]:
        return sorted(self._triggers.values(), key=lambda t: (t.object_name, t.order, t.sequence))

    @property
    def count(self) -> int:
        return len(self._triggers)

    def clear(self) -> None:
        self._triggers.clear()
        self._sequence = 0
