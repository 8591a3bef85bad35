"""
OrderGuard Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from orderguard.services.query import ProductStockRecord, StaticQueryService


# ---------------------------------------------------------------------------
# Global state isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_globals():
    """Reset config singleton, execution context and engines between tests."""
    import orderguard.engine.config as cfg_mod
    from orderguard.db.session import close_all_sessions
    from orderguard.engine.context import clear_execution_context

    cfg_mod._platform_config = None
    clear_execution_context()
    yield
    cfg_mod._platform_config = None
    clear_execution_context()
    close_all_sessions()


@pytest.fixture
def messages():
    """A resolved validation_message catalog."""
    return {
        "product_does_not_exist": "Product does not exist",
        "out_of_stock": "Out of stock",
        "order_quantity_exceeds_stock": "Order quantity exceeds stock",
    }


@pytest.fixture
def static_query():
    """In-memory catalog with one model per stock situation."""
    return StaticQueryService({
        ("RoadMaster", "Velocity"): [ProductStockRecord("m1", Decimal("10"))],
        ("TrailBlazer", "Acme"): [ProductStockRecord("m2", Decimal("2"))],
        ("CityCruiser", "Acme"): [ProductStockRecord("m3", Decimal("0"))],
    })


@pytest.fixture
def catalog_entries():
    return [
        {"name": "RoadMaster", "manufacturer": "Velocity", "quantity": 10},
        {"name": "TrailBlazer", "manufacturer": "Acme", "quantity": 2},
        {"name": "CityCruiser", "manufacturer": "Acme", "quantity": 0},
    ]


@pytest.fixture
def catalog_db(tmp_path, catalog_entries):
    """SQLite catalog seeded with catalog_entries; returns the sessionmaker."""
    from orderguard.db.session import catalog_session_scope, init_catalog_db, seed_catalog

    factory = init_catalog_db(f"sqlite:///{tmp_path / 'catalog.db'}", create_tables=True)
    with catalog_session_scope() as session:
        seed_catalog(session, catalog_entries)
    return factory


@pytest.fixture
def project_root(tmp_path, catalog_entries):
    """
    A project directory with orderguard.yaml, a seeded catalog database and a
    log directory. Returns the root Path.
    """
    root = tmp_path / "project"
    root.mkdir()
    db_path = root / "catalog.db"
    (root / "orderguard.yaml").write_text(
        "platform:\n"
        "  name: TestGuard\n"
        "  version: '1.0.0'\n"
        "environment: dev\n"
        "database:\n"
        f"  url: sqlite:///{db_path.as_posix()}\n"
        "logging:\n"
        "  level: DEBUG\n"
        f"  directory: {(root / 'logs').as_posix()}\n"
        "translations:\n"
        "  default_language: en\n"
        "triggers:\n"
        "  - name: order_stock_validation\n"
        "    object: bicycle_order\n"
        "    events: [before_insert, before_update]\n"
        "    order: 1\n"
        "    handler: orderguard.rules.order_stock:OrderStockTrigger\n",
        encoding="utf-8",
    )
    seed = root / "seed.yaml"
    lines = ["models:"]
    for entry in catalog_entries:
        lines.append(f"  - name: {entry['name']}")
        lines.append(f"    manufacturer: {entry['manufacturer']}")
        lines.append(f"    quantity: {entry['quantity']}")
    seed.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return root
