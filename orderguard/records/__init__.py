"""Record change types and record models."""

from orderguard.records.changes import RecordChange, RecordEvent, RecordTriggerContext
from orderguard.records.models import BICYCLE_ORDER, BicycleOrder

__all__ = [
    "BICYCLE_ORDER",
    "BicycleOrder",
    "RecordChange",
    "RecordEvent",
    "RecordTriggerContext",
]
