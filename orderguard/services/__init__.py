"""Host services handed to triggers: catalog queries and translations."""

from dataclasses import dataclass

from orderguard.services.query import (
    ProductStockRecord,
    QueryService,
    StaticQueryService,
    StockQuery,
)
from orderguard.services.translations import TranslationService


@dataclass
class TriggerServices:
    """Collaborators injected into every trigger instance."""

    query: StockQuery
    translations: TranslationService


__all__ = [
    "ProductStockRecord",
    "QueryService",
    "StaticQueryService",
    "StockQuery",
    "TranslationService",
    "TriggerServices",
]
