"""Types describing the settings schema."""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any


class SettingType(str, enum.Enum):
    """Value type of a setting; drives the default sanitizer."""

    STRING = "string"
    EMAIL = "email"
    URL = "url"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"

    @property
    def rest_type(self) -> str:
        """JSON type the value is transported as."""
        if self in (SettingType.EMAIL, SettingType.URL):
            return "string"
        return self.value


@dataclass(frozen=True)
class EnumOption:
    """One allowed value of an enumerated setting, with its display label."""

    value: Any
    label: str
    installed: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"value": self.value, "label": self.label}
        if self.installed is not None:
            data["installed"] = self.installed
        return data


# Replaces type-based sanitization entirely; may raise SettingValidationError
SanitizeOverride = Callable[[Any], Any]

# Post-processes a stored value for display; receives the related options too
FormatOverride = Callable[[Any, Mapping[str, Any]], Any]


@dataclass(frozen=True)
class SettingDefinition:
    """Declarative description of one exposed setting."""

    key: str
    category: str
    label: str
    description: str
    type: SettingType
    default: Any = None
    enum: tuple[Any, ...] | None = None
    min: float | None = None
    max: float | None = None
    sanitize_override: SanitizeOverride | None = field(default=None, compare=False)
    format_override: FormatOverride | None = field(default=None, compare=False)
    related_options: tuple[str, ...] = ()

    @property
    def enum_values(self) -> list[Any] | None:
        """Allowed raw values in declared order, or None if not enumerated."""
        if self.enum is None:
            return None
        return [_unwrap(option) for option in self.enum]

    def enum_options(self) -> list[Any] | None:
        """Enum members in their response shape."""
        if self.enum is None:
            return None
        return [
            option.to_dict() if isinstance(option, EnumOption) else option
            for option in self.enum
        ]


def _unwrap(option: Any) -> Any:
    if isinstance(option, EnumOption):
        return option.value
    if isinstance(option, Mapping) and "value" in option:
        return option["value"]
    return option


# Ordered categories, each an ordered mapping of key to definition
SettingsSchema = Mapping[str, Mapping[str, SettingDefinition]]
