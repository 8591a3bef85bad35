"""
Catalog query service — stock lookup by (product name, manufacturer name).

The lookup is a parameterized SQLAlchemy select; names are bound, never
interpolated into the statement. Matching is exact string equality as
implemented by the database.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from orderguard.db.base import BicycleModel, Manufacturer
from orderguard.engine.errors import OrderGuardQueryError

logger = logging.getLogger("orderguard.services.query")


@dataclass(frozen=True)
class ProductStockRecord:
    """One catalog row. ``id`` is None when the row does not identify a product."""

    id: Optional[str]
    quantity: Decimal


StockLookup = Callable[[str, str], Iterable[ProductStockRecord]]


class StockQuery(Protocol):
    """Anything that can look up catalog stock for a product/manufacturer pair."""

    def lookup_stock(
        self, product_name: str, manufacturer_name: str
    ) -> Iterable[ProductStockRecord]: ...


class QueryService:
    """
    Reads stock from the catalog database.

    Usage:
        query = QueryService(init_catalog_db("sqlite:///orderguard.db"))
        rows = query.lookup_stock("RoadMaster", "Acme")
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def lookup_stock(self, product_name: str, manufacturer_name: str) -> List[ProductStockRecord]:
        stmt = (
            select(BicycleModel.id, BicycleModel.quantity)
            .join(Manufacturer, BicycleModel.manufacturer_id == Manufacturer.id)
            .where(
                BicycleModel.name == product_name,
                Manufacturer.name == manufacturer_name,
            )
        )
        session = self._session_factory()
        try:
            rows = session.execute(stmt).all()
        except SQLAlchemyError as e:
            raise OrderGuardQueryError(
                f"Stock lookup failed: {e}",
                product_name=product_name,
                manufacturer_name=manufacturer_name,
            ) from e
        finally:
            session.close()

        logger.debug(f"Stock lookup {product_name!r}/{manufacturer_name!r}: {len(rows)} row(s)")
        return [
            ProductStockRecord(id=row.id, quantity=Decimal(row.quantity))
            for row in rows
        ]


class StaticQueryService:
    """
    In-memory stand-in for QueryService, keyed by (product, manufacturer).

    Rows are returned in the order given, so multi-row catalogs can be
    represented.
    """

    def __init__(
        self,
        rows_by_key: Optional[Dict[Tuple[str, str], Sequence[ProductStockRecord]]] = None,
    ):
        self._rows: Dict[Tuple[str, str], List[ProductStockRecord]] = {
            key: list(rows) for key, rows in (rows_by_key or {}).items()
        }

    def add(self, product_name: str, manufacturer_name: str, record: ProductStockRecord) -> None:
        self._rows.setdefault((product_name, manufacturer_name), []).append(record)

    def lookup_stock(self, product_name: str, manufacturer_name: str) -> List[ProductStockRecord]:
        return list(self._rows.get((product_name, manufacturer_name), []))
