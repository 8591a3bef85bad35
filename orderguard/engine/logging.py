"""
OrderGuard Logging — stdlib logger setup plus structured JSON-lines files.

Two streams are written, one file per day each:

    {log_dir}/triggers/{YYYY-MM-DD}.jsonl   one line per trigger run
    {log_dir}/system/{YYYY-MM-DD}.jsonl     runtime startup and similar events
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

if TYPE_CHECKING:
    from orderguard.engine.config import LoggingConfig

logger = logging.getLogger("orderguard.engine.logging")

TRIGGER_STREAM = "triggers"
SYSTEM_STREAM = "system"
STREAMS = (TRIGGER_STREAM, SYSTEM_STREAM)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(config: "LoggingConfig") -> None:
    """Apply the configured level to the ``orderguard`` logger hierarchy."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("orderguard").setLevel(config.level)


class LogEntry:
    """One JSON line bound for a stream."""

    __slots__ = ("stream", "data")

    def __init__(self, stream: str, data: Dict[str, Any]):
        if stream not in STREAMS:
            raise ValueError(f"Unknown log stream: {stream}")
        self.stream = stream
        self.data = data

    def to_json(self) -> str:
        return json.dumps(self.data, default=str, separators=(",", ":"))


class FileLogger:
    """
    Appends entries to the daily file of their stream and reads them back.

    Writes are serialized with a single lock; trigger runs are short and one
    runtime owns one logger.
    """

    def __init__(self, log_dir: str = ".orderguard/logs"):
        self.log_dir = Path(log_dir)
        self._lock = threading.Lock()
        for stream in STREAMS:
            (self.log_dir / stream).mkdir(parents=True, exist_ok=True)

    def path_for(self, stream: str, day: Optional[date] = None) -> Path:
        return self.log_dir / stream / f"{(day or date.today()).isoformat()}.jsonl"

    def write(self, entry: LogEntry) -> None:
        line = entry.to_json()
        with self._lock:
            with open(self.path_for(entry.stream), "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def read(
        self,
        stream: str,
        days: int = 1,
        limit: Optional[int] = None,
        **match: Any,
    ) -> List[Dict[str, Any]]:
        """
        Entries of ``stream`` from the last ``days`` days (today included),
        oldest first. Keyword arguments keep only entries whose fields equal
        the given values, e.g. ``read("triggers", success=False)``.
        """
        entries: List[Dict[str, Any]] = []
        today = date.today()
        for offset in range(days - 1, -1, -1):
            for data in self._lines(self.path_for(stream, today - timedelta(days=offset))):
                if all(data.get(k) == v for k, v in match.items()):
                    entries.append(data)
                    if limit is not None and len(entries) >= limit:
                        return entries
        return entries

    @staticmethod
    def _lines(path: Path) -> Iterator[Dict[str, Any]]:
        if not path.exists():
            return
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Skipping malformed log line in {path}")



# ---------------------------------------------------------------------------
# Log Entry Builders
# ---------------------------------------------------------------------------

def _base_entry(
    event: str,
    level: str,
    object_ref: str,
    execution_id: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "event": event,
        "object_ref": object_ref,
    }
    if execution_id:
        entry["execution_id"] = execution_id
    entry.update(extra)
    return entry


def log_trigger_execution(
    trigger_name: str,
    object_name: str,
    record_event: str,
    execution_id: Optional[str],
    duration_ms: float,
    success: bool,
    change_count: int,
    rejected_count: int = 0,
    error: Optional[str] = None,
) -> LogEntry:
    """Build a trigger execution log entry."""
    data = _base_entry(
        event="trigger_executed",
        level="INFO" if success else "ERROR",
        object_ref=trigger_name,
        execution_id=execution_id,
        object_name=object_name,
        record_event=record_event,
        duration_ms=duration_ms,
        success=success,
        change_count=change_count,
        rejected_count=rejected_count,
    )
    if error:
        data["error"] = error
    return LogEntry(TRIGGER_STREAM, data)


def log_system_event(
    event: str,
    level: str = "INFO",
    details: Optional[Dict[str, Any]] = None,
) -> LogEntry:
    """Build a system event log entry (startup, catalog init, config load)."""
    data = _base_entry(
        event=event,
        level=level,
        object_ref="system",
    )
    if details:
        data["details"] = details
    return LogEntry(SYSTEM_STREAM, data)
