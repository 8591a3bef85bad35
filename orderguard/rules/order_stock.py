"""
Order stock validation — rejects bicycle orders the catalog cannot fill.

Runs before insert and update of ``bicycle_order``. For each pending change
the ordered quantity is checked against the stock of the bicycle model
named by (product, bicycle_manufacturer):

    no catalog row / row without id  -> PRODUCT_ERROR
    stock == 0                       -> OUT_OF_STOCK_ERROR
    stock < order quantity           -> ORDER_QUANTITY_ERROR

Every row returned by the lookup is checked and a later match replaces an
earlier one, so with several rows the last matching row decides.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional, Tuple

from orderguard.records.changes import RecordChange, RecordTriggerContext
from orderguard.services.query import StockLookup
from orderguard.translation_sets import VALIDATION_MESSAGE_GROUP

PRODUCT_ERROR = "PRODUCT_ERROR"
OUT_OF_STOCK_ERROR = "OUT_OF_STOCK_ERROR"
ORDER_QUANTITY_ERROR = "ORDER_QUANTITY_ERROR"

PRODUCT_DOES_NOT_EXIST = "product_does_not_exist"
OUT_OF_STOCK = "out_of_stock"
ORDER_QUANTITY_EXCEEDS_STOCK = "order_quantity_exceeds_stock"

OUT_OF_STOCK_QUANTITY = Decimal(0)

PRODUCT_FIELD = "product"
MANUFACTURER_FIELD = "bicycle_manufacturer"
ORDER_QUANTITY_FIELD = "order_quantity"

Outcome = Tuple[str, Optional[str]]


def check_stock(
    product_name: str,
    manufacturer_name: str,
    order_quantity: Decimal,
    lookup_stock: StockLookup,
    messages: Mapping[str, str],
) -> Optional[Outcome]:
    """
    Decide whether an order must be rejected.

    Returns:
        (error_code, message) or None when the order can be written.
        A message key missing from ``messages`` gives a None message.
    """
    rows = list(lookup_stock(product_name, manufacturer_name))

    if not rows:
        return PRODUCT_ERROR, messages.get(PRODUCT_DOES_NOT_EXIST)

    outcome: Optional[Outcome] = None
    for row in rows:
        if row.id is None:
            outcome = PRODUCT_ERROR, messages.get(PRODUCT_DOES_NOT_EXIST)
        elif row.quantity == OUT_OF_STOCK_QUANTITY:
            outcome = OUT_OF_STOCK_ERROR, messages.get(OUT_OF_STOCK)
        elif row.quantity < order_quantity:
            outcome = ORDER_QUANTITY_ERROR, messages.get(ORDER_QUANTITY_EXCEEDS_STOCK)
    return outcome


def validate(
    change: RecordChange,
    lookup_stock: StockLookup,
    messages: Mapping[str, str],
) -> Optional[Outcome]:
    """Run check_stock() on the order values of a pending change."""
    return check_stock(
        change.get_value(PRODUCT_FIELD),
        change.get_value(MANUFACTURER_FIELD),
        change.get_value(ORDER_QUANTITY_FIELD),
        lookup_stock,
        messages,
    )


class OrderStockValidator:
    """Validates record changes against fixed collaborators."""

    def __init__(self, lookup_stock: StockLookup, messages: Mapping[str, str]):
        self.lookup_stock = lookup_stock
        self.messages = messages

    def validate(self, change: RecordChange) -> Optional[Outcome]:
        return validate(change, self.lookup_stock, self.messages)

    def apply(self, change: RecordChange) -> Optional[Outcome]:
        """Validate and attach the outcome, if any, to the change."""
        outcome = self.validate(change)
        if outcome is not None:
            change.set_error(*outcome)
        return outcome


class OrderStockTrigger:
    """
    Record trigger for bicycle_order (before_insert, before_update).

    Built by the runtime with the injected TriggerServices. Messages are read
    once per execute() call, in the active language.
    """

    def __init__(self, services):
        self.query = services.query
        self.translations = services.translations

    def execute(self, context: RecordTriggerContext) -> None:
        messages = self.translations.read_translations(VALIDATION_MESSAGE_GROUP)
        validator = OrderStockValidator(self.query.lookup_stock, messages)
        for change in context.get_record_changes():
            validator.apply(change)
