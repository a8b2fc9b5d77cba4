"""Settings service: read and update settings through the option store."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from helix.core.logging import get_logger
from helix.services.handlers import SPECIAL_HANDLERS, HandlerFactory, OptionHandler
from helix.services.options import OptionStore
from helix.services.translations import TranslationService
from helix.settings.exceptions import (
    BatchUpdateFailedError,
    NoSettingsProvidedError,
    SettingNotAllowedError,
    SettingsError,
)
from helix.settings.mapping import resolve_store_key
from helix.settings.registry import SettingsRegistry
from helix.settings.sanitize import sanitize
from helix.settings.schema import SettingDefinition

logger = get_logger(__name__)


@dataclass
class UpdateResult:
    """Outcome of a batch update; both maps may be populated."""

    updated: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


class SettingsService:
    """Service for reading and updating settings.

    Provides methods to:
    - Read every setting grouped by category, with defaults for unset options
    - Read a single allowed setting
    - Update one setting or a batch, with per-key error reporting
    """

    def __init__(
        self,
        store: OptionStore,
        registry: SettingsRegistry,
        translations: TranslationService,
        handlers: Mapping[str, HandlerFactory] | None = None,
    ):
        """Initialize the settings service.

        Args:
            store: Option store settings are persisted in.
            registry: Schema registry with the allow-list.
            translations: Translation service used by the language handler.
            handlers: Special-case handler factories by key
                (defaults to SPECIAL_HANDLERS).
        """
        self.store = store
        self.registry = registry
        self._default_handler = OptionHandler(store, translations)
        factories = SPECIAL_HANDLERS if handlers is None else handlers
        self._handlers: dict[str, OptionHandler] = {
            key: factory(store, translations) for key, factory in factories.items()
        }

    async def get_all(self, context: str = "view") -> dict[str, dict[str, dict[str, Any]]]:
        """Get every setting grouped by category.

        Args:
            context: ``"view"`` or ``"edit"``; the edit context also returns
                each setting's default and advisory bounds.

        Returns:
            ``{category: {key: {value, label, description, type, options?}}}``
        """
        names: list[str] = []
        for definition in self.registry.definitions():
            names.append(resolve_store_key(definition.key))
            names.extend(definition.related_options)
        stored = await self.store.get_many(names)

        result: dict[str, dict[str, dict[str, Any]]] = {}
        for category, definitions in self.registry.get_schema().items():
            result[category] = {}
            for key, definition in definitions.items():
                entry: dict[str, Any] = {
                    "value": self._present(definition, stored),
                    "label": definition.label,
                    "description": definition.description,
                    "type": definition.type.value,
                }
                options = definition.enum_options()
                if options is not None:
                    entry["options"] = options
                if context == "edit":
                    entry["default"] = definition.default
                    if definition.min is not None:
                        entry["min"] = definition.min
                    if definition.max is not None:
                        entry["max"] = definition.max
                result[category][key] = entry

        return result

    async def get_one(self, key: str) -> Any:
        """Get the current value of one setting.

        Raises:
            SettingNotAllowedError: If the key is not in the allow-list.
        """
        if not self.registry.is_allowed(key):
            raise SettingNotAllowedError(key)

        definition = self.registry.definition(key)
        if definition is None:
            # Admitted by an allow-list filter only; no schema to apply
            return await self.store.get(resolve_store_key(key))

        stored = await self.store.get_many(
            [resolve_store_key(key), *definition.related_options]
        )
        return self._present(definition, stored)

    async def update_one(self, key: str, value: Any) -> Any:
        """Sanitize and write one setting.

        Args:
            key: Public setting key.
            value: Raw value from the request.

        Returns:
            The value as stored.

        Raises:
            SettingNotAllowedError: If the key is not in the allow-list.
            SettingValidationError: If the value fails validation.
            UpdateFailedError: If the write did not take effect.
            LanguagePackUnavailableError: If a language cannot be installed.
        """
        if not self.registry.is_allowed(key):
            raise SettingNotAllowedError(key, "updated")

        sanitized = sanitize(self.registry, key, value)
        handler = self._handlers.get(key, self._default_handler)

        try:
            stored = await handler.update(key, sanitized)
        except SettingsError as e:
            logger.warning("setting_update_failed", key=key, code=e.code)
            raise

        logger.info("setting_updated", key=key, value_type=type(stored).__name__)
        return stored

    async def update_many(self, values: Mapping[str, Any]) -> UpdateResult:
        """Update several settings independently, in the order given.

        A failing key is recorded and skipped; the rest still apply.

        Raises:
            NoSettingsProvidedError: If ``values`` is empty.
            BatchUpdateFailedError: If every key failed.
        """
        if not values:
            raise NoSettingsProvidedError()

        result = UpdateResult()
        for key, value in values.items():
            try:
                result.updated[key] = await self.update_one(key, value)
            except SettingsError as e:
                result.errors[key] = e.message

        logger.info(
            "settings_batch_updated",
            updated=list(result.updated),
            failed=list(result.errors),
        )

        if result.errors and not result.updated:
            raise BatchUpdateFailedError(result.errors)
        return result

    # Private methods

    @staticmethod
    def _present(definition: SettingDefinition, stored: Mapping[str, Any]) -> Any:
        """Resolve a definition's value from stored options and its default."""
        value = stored.get(resolve_store_key(definition.key), definition.default)
        if definition.format_override is not None:
            related = {name: stored.get(name) for name in definition.related_options}
            value = definition.format_override(value, related)
        return value
