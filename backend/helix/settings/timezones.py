"""Timezone choices and parsing of the timezone setting's value forms."""

from __future__ import annotations

import re
import zoneinfo
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from helix.settings.schema import EnumOption

# Regions offered as city choices
TIMEZONE_CONTINENTS = (
    "Africa",
    "America",
    "Antarctica",
    "Arctic",
    "Asia",
    "Atlantic",
    "Australia",
    "Europe",
    "Indian",
    "Pacific",
)

# Manual UTC offsets offered alongside city choices
UTC_OFFSETS = (
    -12, -11.5, -11, -10.5, -10, -9.5, -9, -8.5, -8, -7.5, -7, -6.5, -6,
    -5.5, -5, -4.5, -4, -3.5, -3, -2.5, -2, -1.5, -1, -0.5, 0, 0.5, 1, 1.5,
    2, 2.5, 3, 3.5, 4, 4.5, 5, 5.5, 5.75, 6, 6.5, 7, 7.5, 8, 8.5, 8.75, 9,
    9.5, 10, 10.5, 11, 11.5, 12, 12.75, 13, 13.75, 14,
)

MIN_OFFSET = -12.0
MAX_OFFSET = 14.0

UTC_OFFSET_PATTERN = re.compile(r"^UTC([+-])(\d+(?:\.\d+)?)$")
NUMERIC_PATTERN = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


@dataclass(frozen=True)
class ParsedTimezone:
    """A timezone value resolved to exactly one of the two backing options.

    ``gmt_offset`` is set for offset forms, ``timezone_string`` for city forms.
    """

    timezone_string: str | None = None
    gmt_offset: float | None = None

    @property
    def is_offset(self) -> bool:
        return self.gmt_offset is not None


def parse_timezone(value: str) -> ParsedTimezone:
    """Parse a timezone value into its offset or city form.

    Accepted forms, checked in order:
        ``UTC+5.5`` / ``UTC-3``: offset notation.
        ``5.5`` / ``-3``: bare numeric offset in hours.
        anything else: a city identifier such as ``Asia/Kolkata``.

    Validity of the city identifier is not checked here.
    """
    match = UTC_OFFSET_PATTERN.match(value)
    if match:
        offset = float(match.group(2))
        return ParsedTimezone(gmt_offset=-offset if match.group(1) == "-" else offset)

    if NUMERIC_PATTERN.match(value):
        return ParsedTimezone(gmt_offset=float(value))

    return ParsedTimezone(timezone_string=value)


def format_offset(offset: float) -> str:
    """Render an hour offset in ``UTC+N`` notation (``5.5`` -> ``UTC+5.5``)."""
    sign = "-" if offset < 0 else "+"
    return f"UTC{sign}{abs(offset):g}"


def offset_label(offset: float) -> str:
    """Render an hour offset for display (``5.5`` -> ``UTC+5:30``)."""
    sign = "-" if offset < 0 else "+"
    hours = int(abs(offset))
    minutes = round((abs(offset) - hours) * 60)
    if minutes:
        return f"UTC{sign}{hours}:{minutes:02d}"
    return f"UTC{sign}{hours}"


def format_timezone(timezone_string: Any, gmt_offset: Any) -> str:
    """Combine the two backing options into the value a client sees."""
    if isinstance(timezone_string, str) and timezone_string:
        return timezone_string
    if gmt_offset in (None, ""):
        return "UTC"
    try:
        return format_offset(float(gmt_offset))
    except (TypeError, ValueError):
        return "UTC"


@lru_cache(maxsize=1)
def city_timezones() -> frozenset[str]:
    """IANA zone names offered as city choices."""
    return frozenset(
        name
        for name in zoneinfo.available_timezones()
        if name.split("/", 1)[0] in TIMEZONE_CONTINENTS and "/" in name
    )


def is_known_timezone(name: str) -> bool:
    """Check whether a city identifier names a zone we can offer."""
    return name == "UTC" or name in city_timezones()


def _city_label(name: str) -> str:
    return " - ".join(part.replace("_", " ") for part in name.split("/"))


@lru_cache(maxsize=1)
def timezone_options() -> tuple[EnumOption, ...]:
    """All timezone choices: UTC, cities by region, then manual offsets."""
    options = [EnumOption(value="UTC", label="UTC")]
    options.extend(
        EnumOption(value=name, label=_city_label(name))
        for name in sorted(city_timezones())
    )
    options.extend(
        EnumOption(value=format_offset(offset), label=offset_label(offset))
        for offset in UTC_OFFSETS
    )
    return tuple(options)
