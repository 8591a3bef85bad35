"""Unit tests for orderguard.services.translations — message group resolution."""

import pytest

from orderguard.engine.context import ExecutionContext, set_execution_context
from orderguard.engine.errors import OrderGuardConfigError, OrderGuardTranslationError
from orderguard.services.translations import TranslationService
from orderguard.translation_sets import VALIDATION_MESSAGE_GROUP, validation_messages

KEYS = {"product_does_not_exist", "out_of_stock", "order_quantity_exceeds_stock"}


class TestBuiltinGroup:
    def test_every_key_has_english(self):
        data = validation_messages()
        assert set(data) == KEYS
        for texts in data.values():
            assert "en" in texts

    def test_builtin_group_registered(self):
        service = TranslationService.with_builtin_groups()
        assert service.has_group(VALIDATION_MESSAGE_GROUP)


class TestReadTranslations:
    def setup_method(self):
        self.service = TranslationService.with_builtin_groups()

    def test_english_default(self):
        messages = self.service.read_translations(VALIDATION_MESSAGE_GROUP)
        assert set(messages) == KEYS
        assert messages["out_of_stock"] == "This bicycle model is out of stock."

    def test_explicit_language(self):
        messages = self.service.read_translations(VALIDATION_MESSAGE_GROUP, lang="es")
        assert messages["out_of_stock"] == "Este modelo de bicicleta está agotado."

    def test_context_language(self):
        set_execution_context(ExecutionContext(preferred_language="fr"))
        messages = self.service.read_translations(VALIDATION_MESSAGE_GROUP)
        assert messages["out_of_stock"] == "Ce modèle de vélo est en rupture de stock."

    def test_unknown_language_falls_back_to_english(self):
        messages = self.service.read_translations(VALIDATION_MESSAGE_GROUP, lang="ja")
        assert messages["out_of_stock"] == "This bicycle model is out of stock."

    def test_falls_back_to_default_language_first(self):
        service = TranslationService(default_language="de")
        service.register_group("g", {"k": {"de": "Hallo", "en": "Hello"}})
        assert service.read_translations("g", lang="fr") == {"k": "Hallo"}

    def test_key_without_usable_text_is_omitted(self):
        service = TranslationService()
        service.register_group("g", {"k": {"fr": "Bonjour"}, "j": {"en": "Hi"}})
        assert service.read_translations("g", lang="es") == {"j": "Hi"}

    def test_unknown_group_raises(self):
        with pytest.raises(OrderGuardTranslationError) as exc_info:
            self.service.read_translations("nope")
        assert exc_info.value.group == "nope"

    def test_fresh_dict_each_call(self):
        first = self.service.read_translations(VALIDATION_MESSAGE_GROUP)
        first["out_of_stock"] = "changed"
        second = self.service.read_translations(VALIDATION_MESSAGE_GROUP)
        assert second["out_of_stock"] == "This bicycle model is out of stock."


class TestLoadYaml:
    def test_merge_over_builtin(self, tmp_path):
        catalog = tmp_path / "messages.yaml"
        catalog.write_text(
            "groups:\n"
            "  validation_message:\n"
            "    out_of_stock:\n"
            "      de: Nicht vorrätig\n"
            "      en: Sold out\n",
            encoding="utf-8",
        )
        service = TranslationService.with_builtin_groups()
        assert service.load_yaml(str(catalog)) == 1

        assert service.read_translations(VALIDATION_MESSAGE_GROUP, lang="de")["out_of_stock"] == "Nicht vorrätig"
        messages = service.read_translations(VALIDATION_MESSAGE_GROUP, lang="en")
        assert messages["out_of_stock"] == "Sold out"
        assert messages["product_does_not_exist"].startswith("The selected bicycle model")

    def test_missing_file(self, tmp_path):
        with pytest.raises(OrderGuardConfigError):
            TranslationService().load_yaml(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("groups: [unclosed\n", encoding="utf-8")
        with pytest.raises(OrderGuardConfigError):
            TranslationService().load_yaml(str(bad))

    @pytest.mark.parametrize("content", [
        "groups:\n  validation_message:\n    out_of_stock: Nope\n",
        "groups:\n  - validation_message\n",
        "groups:\n  validation_message: [out_of_stock]\n",
        "- groups\n",
    ])
    def test_malformed_catalog(self, tmp_path, content):
        bad = tmp_path / "bad.yaml"
        bad.write_text(content, encoding="utf-8")
        service = TranslationService.with_builtin_groups()
        with pytest.raises(OrderGuardConfigError) as exc_info:
            service.load_yaml(str(bad))
        assert exc_info.value.context["catalog_file"] == str(bad)
        assert service.read_translations(VALIDATION_MESSAGE_GROUP, lang="en")["out_of_stock"] != "Nope"
