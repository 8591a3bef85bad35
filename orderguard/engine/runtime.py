"""
OrderGuard Trigger Runtime — fires registered triggers for a batch of changes.

Ties together:
- TriggerRegistry (which triggers run for an object/event, in what order)
- TriggerServices (query + translation collaborators handed to triggers)
- FileLogger (one JSONL execution entry per trigger run)

Usage:
    runtime = build_runtime(load_platform_config())
    context = runtime.fire("bicycle_order", RecordEvent.BEFORE_INSERT, changes)
    if context.rejected:
        ...  # abort the write
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from orderguard.engine.config import PlatformConfig
from orderguard.engine.context import get_execution_context
from orderguard.engine.errors import OrderGuardError, OrderGuardTriggerError
from orderguard.engine.logging import (
    FileLogger,
    configure_logging,
    log_system_event,
    log_trigger_execution,
)
from orderguard.engine.registry import TriggerDefinition, TriggerRegistry
from orderguard.records.changes import RecordChange, RecordEvent, RecordTriggerContext
from orderguard.services import TriggerServices

logger = logging.getLogger("orderguard.engine.runtime")


class TriggerRuntime:
    """
    Runs every enabled trigger registered for an object/event.

    A trigger that raises fails the whole invocation: the error is logged and
    re-raised as OrderGuardTriggerError, and later triggers do not run.
    """

    def __init__(
        self,
        registry: TriggerRegistry,
        services: TriggerServices,
        file_logger: Optional[FileLogger] = None,
    ):
        self.registry = registry
        self.services = services
        self.file_logger = file_logger

    def fire(
        self,
        object_name: str,
        event: str,
        changes: Iterable[RecordChange],
    ) -> RecordTriggerContext:
        """
        Run the triggers for one write batch.

        Args:
            object_name: Record object name (e.g., "bicycle_order").
            event: One of RecordEvent.ALL.
            changes: Pending changes; triggers annotate them in place.

        Returns:
            The RecordTriggerContext holding the (possibly annotated) changes.
        """
        if event not in RecordEvent.ALL:
            raise ValueError(f"Unknown record event: {event}")

        ctx = get_execution_context()
        context = RecordTriggerContext(
            object_name=object_name,
            event=event,
            record_changes=list(changes),
            execution_id=ctx.execution_id if ctx else None,
        )

        triggers = self.registry.get_for(object_name, event)
        if not triggers:
            logger.debug(f"No triggers for {object_name}.{event}")
            return context

        for trigger in triggers:
            self._run(trigger, context)
        return context

    def _run(self, trigger: TriggerDefinition, context: RecordTriggerContext) -> None:
        start_time = time.monotonic()
        try:
            trigger.handler(self.services).execute(context)
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.error(
                f"Trigger failed: {trigger.name} for "
                f"{context.object_name}.{context.event}: {e}"
            )
            self._write(trigger, context, duration_ms, success=False, error=str(e))
            if isinstance(e, OrderGuardError):
                raise
            raise OrderGuardTriggerError(
                f"Trigger '{trigger.name}' failed: {e}",
                object_ref=trigger.name,
                execution_id=context.execution_id,
                object_name=context.object_name,
                event=context.event,
            ) from e

        duration_ms = (time.monotonic() - start_time) * 1000
        self._write(trigger, context, duration_ms, success=True)

    def _write(
        self,
        trigger: TriggerDefinition,
        context: RecordTriggerContext,
        duration_ms: float,
        success: bool,
        error: Optional[str] = None,
    ) -> None:
        if self.file_logger is None:
            return
        self.file_logger.write(log_trigger_execution(
            trigger_name=trigger.name,
            object_name=context.object_name,
            record_event=context.event,
            execution_id=context.execution_id,
            duration_ms=duration_ms,
            success=success,
            change_count=len(context.record_changes),
            rejected_count=len(context.rejected),
            error=error,
        ))


def build_services(config: PlatformConfig, create_tables: bool = False) -> TriggerServices:
    """Catalog query + translation services from configuration."""
    from orderguard.db.session import init_catalog_db
    from orderguard.services.query import QueryService
    from orderguard.services.translations import TranslationService

    session_factory = init_catalog_db(
        config.database.url,
        create_tables=create_tables,
        echo=config.database.echo,
    )
    translations = TranslationService.with_builtin_groups(
        default_language=config.translations.default_language,
    )
    for catalog_file in config.translations.catalog_files:
        translations.load_yaml(catalog_file)

    return TriggerServices(query=QueryService(session_factory), translations=translations)


def build_runtime(
    config: PlatformConfig,
    services: Optional[TriggerServices] = None,
    create_tables: bool = False,
) -> TriggerRuntime:
    """
    Wire config -> logging -> services -> registry into a TriggerRuntime.

    Pass ``services`` to inject collaborators instead of building them from
    the database/translation configuration.
    """
    configure_logging(config.logging)

    file_logger = FileLogger(config.logging.directory) if config.logging.file_logging else None

    if services is None:
        services = build_services(config, create_tables=create_tables)

    registry = TriggerRegistry()
    count = registry.register_from_config(config.triggers)

    if file_logger:
        file_logger.write(log_system_event(
            "runtime_started",
            details={"environment": config.environment, "triggers": count},
        ))
    logger.info(f"OrderGuard runtime ready ({config.environment}, {count} trigger(s))")
    return TriggerRuntime(registry, services, file_logger=file_logger)
