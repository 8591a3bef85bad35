"""Bicycle order record — the object the stock validation trigger runs on."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from orderguard.records.changes import RecordChange

BICYCLE_ORDER = "bicycle_order"


class BicycleOrder(BaseModel):
    """
    An order for a quantity of one bicycle model.

    Field names match the values the trigger reads from RecordChange.new.
    order_quantity is not range-checked here; negative quantities are
    passed through to the trigger as entered.
    """

    product: str = Field(description="Bicycle model name")
    bicycle_manufacturer: str = Field(description="Manufacturer name")
    order_quantity: Decimal = Field(description="Quantity ordered")

    def to_change(self, old: Optional[Dict[str, Any]] = None) -> RecordChange:
        return RecordChange(new=self.model_dump(), old=old)
