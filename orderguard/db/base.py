"""
OrderGuard Database Base — SQLAlchemy declarative base, engine registry and
the product catalog tables the stock lookup reads.

Provides:
- Base: SQLAlchemy declarative base
- EngineRegistry: named engines (one per catalog database)
- Manufacturer / BicycleModel: catalog tables
"""

from __future__ import annotations

import uuid
from typing import Any, Dict

from sqlalchemy import Column, ForeignKey, Numeric, String, UniqueConstraint, create_engine
from sqlalchemy.orm import DeclarativeBase, relationship, sessionmaker


def _new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all OrderGuard models."""
    pass


class Manufacturer(Base):
    __tablename__ = "manufacturers"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False, unique=True)

    models = relationship("BicycleModel", back_populates="manufacturer")

    def __repr__(self) -> str:
        return f"<Manufacturer({self.name})>"


class BicycleModel(Base):
    """A bicycle model and its stock on hand."""
    __tablename__ = "bicycle_models"
    __table_args__ = (
        UniqueConstraint("name", "manufacturer_id", name="uq_bicycle_model_manufacturer"),
    )

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    manufacturer_id = Column(String(32), ForeignKey("manufacturers.id"), nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False, default=0)

    manufacturer = relationship("Manufacturer", back_populates="models")

    def __repr__(self) -> str:
        return f"<BicycleModel({self.name}, qty={self.quantity})>"


class EngineRegistry:
    """
    Registry of named SQLAlchemy engines.

    Usage:
        registry = EngineRegistry()
        registry.register("catalog", "sqlite:///orderguard.db")
        Session = registry.get_session_factory("catalog")
    """

    def __init__(self):
        self._engines: Dict[str, Any] = {}
        self._session_factories: Dict[str, sessionmaker] = {}

    def register(self, name: str, url: str, **kwargs: Any) -> None:
        """Register (or replace) a database engine."""
        if name in self._engines:
            self._engines[name].dispose()
        engine = create_engine(url, **kwargs)
        self._engines[name] = engine
        self._session_factories[name] = sessionmaker(bind=engine)

    def get(self, name: str) -> Any:
        if name not in self._engines:
            raise KeyError(f"Engine '{name}' not registered. Available: {list(self._engines.keys())}")
        return self._engines[name]

    def get_session_factory(self, name: str) -> sessionmaker:
        if name not in self._session_factories:
            raise KeyError(f"Session factory '{name}' not found. Available: {list(self._session_factories.keys())}")
        return self._session_factories[name]

    def dispose(self) -> None:
        """Dispose every engine (close connection pools) and forget them."""
        for engine in self._engines.values():
            engine.dispose()
        self._engines.clear()
        self._session_factories.clear()


# Global engine registry singleton
engine_registry = EngineRegistry()
