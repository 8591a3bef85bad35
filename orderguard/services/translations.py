"""
Translation service — message groups resolved for the active language.

A message group is a dict ``{key: {lang: text}}``. Groups come from the
built-in translation sets and from YAML catalog files listed in
``translations.catalog_files``:

    groups:
      validation_message:
        out_of_stock:
          en: "Out of stock"
          de: "Nicht vorrätig"

Groups loaded later are merged key by key over earlier ones.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from orderguard.engine.context import get_preferred_language, resolve_translation
from orderguard.engine.errors import OrderGuardConfigError, OrderGuardTranslationError
from orderguard.translation_sets import BUILTIN_GROUPS

logger = logging.getLogger("orderguard.services.translations")

MessageGroup = Dict[str, Dict[str, str]]


def _check_groups(groups: Any, file_path: Path) -> Dict[str, MessageGroup]:
    """Ensure a catalog's groups are shaped ``{group: {key: {lang: text}}}``."""

    def invalid(detail: str) -> OrderGuardConfigError:
        return OrderGuardConfigError(
            f"Invalid translation catalog {file_path}: {detail}",
            catalog_file=str(file_path),
        )

    if not isinstance(groups, dict):
        raise invalid("'groups' must be a mapping")

    checked: Dict[str, MessageGroup] = {}
    for name, data in groups.items():
        data = data or {}
        if not isinstance(data, dict):
            raise invalid(f"group '{name}' must be a mapping of message keys")
        for key, texts in data.items():
            if texts is not None and not isinstance(texts, dict):
                raise invalid(f"'{name}.{key}' must map language codes to text")
        checked[name] = data
    return checked


class TranslationService:
    """
    Holds message groups and resolves them for a language.

    Usage:
        translations = TranslationService.with_builtin_groups()
        messages = translations.read_translations("validation_message")
        messages["out_of_stock"]
    """

    def __init__(self, default_language: str = "en"):
        self.default_language = default_language
        self._groups: Dict[str, MessageGroup] = {}

    @classmethod
    def with_builtin_groups(cls, default_language: str = "en") -> "TranslationService":
        service = cls(default_language=default_language)
        for name, loader in BUILTIN_GROUPS.items():
            service.register_group(name, loader())
        return service

    def register_group(self, name: str, data: MessageGroup) -> None:
        group = self._groups.setdefault(name, {})
        for key, texts in data.items():
            group.setdefault(key, {}).update(texts or {})
        logger.debug(f"Registered message group '{name}' ({len(data)} keys)")

    def load_yaml(self, path: str) -> int:
        """
        Merge the groups of a YAML catalog file.

        Returns:
            Number of groups read from the file.
        """
        file_path = Path(path)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise OrderGuardConfigError(
                f"Cannot load translation catalog {file_path}: {e}",
                catalog_file=str(file_path),
            ) from e

        if not isinstance(raw, dict):
            raise OrderGuardConfigError(
                f"Invalid translation catalog {file_path}: expected a mapping",
                catalog_file=str(file_path),
            )
        groups = _check_groups(raw.get("groups") or {}, file_path)
        for name, data in groups.items():
            self.register_group(name, data)
        logger.info(f"Loaded {len(groups)} message group(s) from {file_path}")
        return len(groups)

    def has_group(self, name: str) -> bool:
        return name in self._groups

    def read_translations(self, group: str, lang: Optional[str] = None) -> Dict[str, str]:
        """
        Resolve every key of a group for one language.

        Language: ``lang`` if given, else the active ExecutionContext's
        preferred language, else the service default. Per key, missing text
        falls back to the default language and then to "en"; keys with no
        text at all are left out of the result.
        """
        data = self._groups.get(group)
        if data is None:
            raise OrderGuardTranslationError(
                f"Message group not found: {group}", group=group,
            )

        if lang is None:
            lang = get_preferred_language(self.default_language)

        resolved: Dict[str, str] = {}
        for key in data:
            text = resolve_translation(data, key, lang, self.default_language)
            if text is not None:
                resolved[key] = text
        return resolved
