"""
OrderGuard Configuration — Load and validate orderguard.yaml at startup.

Trigger registration lives here: each trigger is declared by object name,
event set and order, and bound to a handler by import path.

Usage:
    from orderguard.engine.config import load_platform_config, get_platform_config
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from orderguard.engine.errors import OrderGuardConfigError
from orderguard.records.changes import RecordEvent

CONFIG_FILENAME = "orderguard.yaml"


# ---------------------------------------------------------------------------
# Pydantic models for orderguard.yaml
# ---------------------------------------------------------------------------

class DatabaseConfig(BaseModel):
    url: str = "sqlite:///orderguard.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: str = ".orderguard/logs"
    file_logging: bool = True

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level '{v}'")
        return v


class TranslationsConfig(BaseModel):
    default_language: str = "en"
    catalog_files: List[str] = Field(default_factory=list)


class TriggerConfig(BaseModel):
    """One record trigger: which object, which events, in which order."""
    name: str
    object: str
    events: List[str]
    order: int = Field(default=1, ge=1)
    handler: str
    enabled: bool = True

    @field_validator("events")
    @classmethod
    def validate_events(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("a trigger needs at least one event")
        unknown = [e for e in v if e not in RecordEvent.ALL]
        if unknown:
            raise ValueError(f"unknown record event(s): {unknown}")
        return v

    @field_validator("handler")
    @classmethod
    def validate_handler(cls, v: str) -> str:
        if ":" not in v:
            raise ValueError(f"handler must be 'module:attribute', got '{v}'")
        return v


def _default_triggers() -> List[TriggerConfig]:
    return [
        TriggerConfig(
            name="order_stock_validation",
            object="bicycle_order",
            events=[RecordEvent.BEFORE_INSERT, RecordEvent.BEFORE_UPDATE],
            order=1,
            handler="orderguard.rules.order_stock:OrderStockTrigger",
        ),
    ]


class PlatformConfig(BaseModel):
    """Root model for orderguard.yaml."""
    name: str = "OrderGuard"
    version: str = "1.0.0"
    environment: str = "dev"

    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    translations: TranslationsConfig = TranslationsConfig()
    triggers: List[TriggerConfig] = Field(default_factory=_default_triggers)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ("dev", "staging", "prod"):
            raise ValueError(f"environment must be dev/staging/prod, got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_platform_config: Optional[PlatformConfig] = None


def _find_project_root() -> Path:
    """Find the project root by looking for orderguard.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILENAME).exists():
            return parent
    return current


def load_platform_config(config_path: Optional[str] = None) -> PlatformConfig:
    """
    Load and validate orderguard.yaml.

    Args:
        config_path: Explicit path to orderguard.yaml. If None, auto-discovers.

    Returns:
        Validated PlatformConfig instance. Defaults if the file does not exist.

    Raises:
        OrderGuardConfigError: unreadable YAML or invalid values.
    """
    global _platform_config

    if config_path is None:
        config_path = str(_find_project_root() / CONFIG_FILENAME)

    path = Path(config_path)
    if not path.exists():
        _platform_config = PlatformConfig()
        return _platform_config

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise OrderGuardConfigError(
            f"Could not parse {path}: {e}", config_path=str(path)
        ) from e

    if not isinstance(raw, dict):
        raise OrderGuardConfigError(
            f"Invalid configuration in {path}: expected a mapping, got {type(raw).__name__}",
            config_path=str(path),
        )

    # Top-level "platform:" block carries name/version/environment
    platform_data = raw.get("platform", {}) or {}
    if not isinstance(platform_data, dict):
        raise OrderGuardConfigError(
            f"Invalid configuration in {path}: 'platform' must be a mapping",
            config_path=str(path),
        )
    config_data = {
        "name": platform_data.get("name", raw.get("name", "OrderGuard")),
        "version": platform_data.get("version", raw.get("version", "1.0.0")),
        "environment": platform_data.get("environment", raw.get("environment", "dev")),
        "database": raw.get("database", {}) or {},
        "logging": raw.get("logging", {}) or {},
        "translations": raw.get("translations", {}) or {},
    }
    if "triggers" in raw:
        config_data["triggers"] = raw["triggers"] or []

    try:
        _platform_config = PlatformConfig(**config_data)
    except ValidationError as e:
        raise OrderGuardConfigError(
            f"Invalid configuration in {path}",
            config_path=str(path),
            validation_errors=e.errors(),
        ) from e
    return _platform_config


def get_platform_config() -> PlatformConfig:
    """Get the currently loaded platform config, loading if necessary."""
    global _platform_config
    if _platform_config is None:
        _platform_config = load_platform_config()
    return _platform_config
