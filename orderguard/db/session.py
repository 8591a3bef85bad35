"""
OrderGuard Database Session Management.

Single entry point for catalog DB initialisation plus a context manager for
sessions, and the seeding helper used by ``orderguard init --seed``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, Generator, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from orderguard.db.base import Base, BicycleModel, Manufacturer, engine_registry

logger = logging.getLogger("orderguard.db.session")

CATALOG_ENGINE = "catalog"

_catalog_session_factory: Optional[sessionmaker] = None


def init_catalog_db(
    db_url: str,
    create_tables: bool = False,
    echo: bool = False,
) -> sessionmaker:
    """
    Register the "catalog" engine and build its session factory.

    Args:
        db_url:        SQLAlchemy URL of the product catalog database.
        create_tables: Run Base.metadata.create_all() (``orderguard init`` and tests).
        echo:          Echo SQL statements.

    Returns:
        A sessionmaker bound to the catalog engine.
    """
    global _catalog_session_factory

    engine_registry.register(CATALOG_ENGINE, db_url, echo=echo)
    engine = engine_registry.get(CATALOG_ENGINE)

    if create_tables:
        Base.metadata.create_all(engine)
        logger.info(f"Catalog tables ensured on {engine.url.render_as_string(hide_password=True)}")

    _catalog_session_factory = engine_registry.get_session_factory(CATALOG_ENGINE)
    return _catalog_session_factory


def get_catalog_session() -> Session:
    if _catalog_session_factory is None:
        raise RuntimeError(
            "Catalog DB not initialized. Call init_catalog_db() first."
        )
    return _catalog_session_factory()


@contextmanager
def catalog_session_scope() -> Generator[Session, None, None]:
    """
    Context manager for catalog DB sessions with auto-commit/rollback.

    Usage:
        with catalog_session_scope() as session:
            seed_catalog(session, entries)
    """
    session = get_catalog_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def seed_catalog(session: Session, entries: Iterable[Dict[str, Any]]) -> int:
    """
    Insert or update catalog rows.

    Each entry: {"name": str, "manufacturer": str, "quantity": number}.
    Manufacturers are created on first use; an existing model has its
    quantity overwritten.

    Returns:
        Number of models written.
    """
    manufacturers: Dict[str, Manufacturer] = {
        m.name: m for m in session.scalars(select(Manufacturer))
    }
    count = 0
    for entry in entries:
        maker_name = entry["manufacturer"]
        maker = manufacturers.get(maker_name)
        if maker is None:
            maker = Manufacturer(name=maker_name)
            session.add(maker)
            session.flush()
            manufacturers[maker_name] = maker

        quantity = Decimal(str(entry.get("quantity", 0)))
        model = session.scalars(
            select(BicycleModel).where(
                BicycleModel.name == entry["name"],
                BicycleModel.manufacturer_id == maker.id,
            )
        ).first()
        if model is None:
            session.add(BicycleModel(
                name=entry["name"], manufacturer_id=maker.id, quantity=quantity,
            ))
        else:
            model.quantity = quantity
        count += 1

    session.flush()
    logger.info(f"Seeded {count} bicycle model(s)")
    return count


def close_all_sessions() -> None:
    """Dispose all engines. Used during shutdown and between tests."""
    global _catalog_session_factory
    _catalog_session_factory = None
    engine_registry.dispose()
