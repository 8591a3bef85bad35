"""Unit tests for orderguard.engine.config — PlatformConfig, TriggerConfig, loading."""

import pytest
from pydantic import ValidationError

from orderguard.engine.config import (
    DatabaseConfig,
    LoggingConfig,
    PlatformConfig,
    TriggerConfig,
    get_platform_config,
    load_platform_config,
)
from orderguard.engine.errors import OrderGuardConfigError


class TestPlatformConfig:
    def test_defaults(self):
        cfg = PlatformConfig()
        assert cfg.name == "OrderGuard"
        assert cfg.environment == "dev"
        assert cfg.database.url == "sqlite:///orderguard.db"
        assert cfg.logging.level == "INFO"
        assert cfg.translations.default_language == "en"

    def test_default_trigger(self):
        cfg = PlatformConfig()
        assert len(cfg.triggers) == 1
        trigger = cfg.triggers[0]
        assert trigger.name == "order_stock_validation"
        assert trigger.object == "bicycle_order"
        assert set(trigger.events) == {"before_insert", "before_update"}
        assert trigger.order == 1

    def test_invalid_environment(self):
        with pytest.raises(ValueError, match="dev/staging/prod"):
            PlatformConfig(environment="test")

    def test_custom_database(self):
        cfg = PlatformConfig(database=DatabaseConfig(url="sqlite://", echo=True))
        assert cfg.database.echo is True

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


class TestTriggerConfig:
    def _make(self, **overrides):
        data = {
            "name": "t",
            "object": "bicycle_order",
            "events": ["before_insert"],
            "handler": "orderguard.rules.order_stock:OrderStockTrigger",
        }
        data.update(overrides)
        return TriggerConfig(**data)

    def test_valid(self):
        cfg = self._make()
        assert cfg.order == 1
        assert cfg.enabled is True

    def test_unknown_event(self):
        with pytest.raises(ValidationError, match="unknown record event"):
            self._make(events=["on_save"])

    def test_empty_events(self):
        with pytest.raises(ValidationError):
            self._make(events=[])

    def test_order_must_be_positive(self):
        with pytest.raises(ValidationError):
            self._make(order=0)

    def test_handler_needs_colon(self):
        with pytest.raises(ValidationError, match="module:attribute"):
            self._make(handler="orderguard.rules.order_stock.OrderStockTrigger")


class TestLoadPlatformConfig:
    def test_load_from_file(self, project_root):
        cfg = load_platform_config(str(project_root / "orderguard.yaml"))
        assert cfg.name == "TestGuard"
        assert cfg.logging.level == "DEBUG"
        assert cfg.database.url.endswith("catalog.db")
        assert cfg.triggers[0].handler == "orderguard.rules.order_stock:OrderStockTrigger"

    def test_auto_discover(self, project_root, monkeypatch):
        nested = project_root / "sub" / "dir"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_platform_config().name == "TestGuard"

    def test_missing_file_returns_defaults(self, tmp_path):
        cfg = load_platform_config(str(tmp_path / "nonexistent.yaml"))
        assert cfg.name == "OrderGuard"
        assert len(cfg.triggers) == 1

    def test_empty_trigger_list_disables_defaults(self, tmp_path):
        path = tmp_path / "orderguard.yaml"
        path.write_text("triggers: []\n", encoding="utf-8")
        assert load_platform_config(str(path)).triggers == []

    def test_invalid_values_raise_config_error(self, tmp_path):
        path = tmp_path / "orderguard.yaml"
        path.write_text("environment: local\n", encoding="utf-8")
        with pytest.raises(OrderGuardConfigError) as exc_info:
            load_platform_config(str(path))
        assert exc_info.value.context["validation_errors"]

    def test_invalid_yaml_raises_config_error(self, tmp_path):
        path = tmp_path / "orderguard.yaml"
        path.write_text("database: [unclosed\n", encoding="utf-8")
        with pytest.raises(OrderGuardConfigError):
            load_platform_config(str(path))

    @pytest.mark.parametrize("content", [
        "- a\n- b\n",
        "just a string\n",
        "platform: [a, b]\n",
        "database: [a, b]\n",
    ])
    def test_non_mapping_yaml_raises_config_error(self, tmp_path, content):
        path = tmp_path / "orderguard.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(OrderGuardConfigError) as exc_info:
            load_platform_config(str(path))
        assert exc_info.value.context["config_path"] == str(path)

    def test_get_platform_config_caches(self, project_root):
        loaded = load_platform_config(str(project_root / "orderguard.yaml"))
        assert get_platform_config() is loaded
