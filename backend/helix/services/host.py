"""Snapshot of host state the settings schema derives its defaults from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from helix.core.config import settings
from helix.core.logging import get_logger
from helix.services.options import OptionStore
from helix.services.translations import TranslationService
from helix.settings.mapping import GMT_OFFSET_OPTION
from helix.settings.schema import EnumOption
from helix.settings.timezones import timezone_options

logger = get_logger(__name__)

DEFAULT_DATE_FORMAT = "F j, Y"
DEFAULT_TIME_FORMAT = "g:i a"

# Options read to build a snapshot
SNAPSHOT_OPTIONS = (
    "blogname",
    "blogdescription",
    "siteurl",
    "home",
    "admin_email",
    "WPLANG",
    "timezone_string",
    GMT_OFFSET_OPTION,
    "date_format",
    "time_format",
)


@dataclass(frozen=True)
class HostSnapshot:
    """Read-only view of the host values used as schema defaults."""

    site_title: str = ""
    tagline: str = ""
    site_url: str = "http://localhost"
    home_url: str = "http://localhost"
    admin_email: str = ""
    locale: str = ""
    timezone_string: str = ""
    gmt_offset: Any = ""
    date_format: str = DEFAULT_DATE_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT
    language_options: tuple[EnumOption, ...] = field(default_factory=tuple)
    timezone_options: tuple[EnumOption, ...] = field(default_factory=tuple)


class HostService:
    """Builds host snapshots from the option store and the environment."""

    def __init__(self, store: OptionStore, translations: TranslationService):
        """Initialize the host service.

        Args:
            store: Option store to read current values from.
            translations: Translation service for the language choices.
        """
        self.store = store
        self.translations = translations

    async def snapshot(self) -> HostSnapshot:
        """Read the current host state.

        Returns:
            A HostSnapshot; nothing is written.
        """
        values = await self.store.get_many(SNAPSHOT_OPTIONS)
        site_url = values.get("siteurl") or settings.site_url

        snapshot = HostSnapshot(
            site_title=values.get("blogname", ""),
            tagline=values.get("blogdescription", ""),
            site_url=site_url,
            home_url=values.get("home") or settings.home_url or site_url,
            admin_email=values.get("admin_email", ""),
            locale=values.get("WPLANG", settings.default_locale),
            timezone_string=values.get("timezone_string", ""),
            gmt_offset=values.get(GMT_OFFSET_OPTION, ""),
            date_format=values.get("date_format") or DEFAULT_DATE_FORMAT,
            time_format=values.get("time_format") or DEFAULT_TIME_FORMAT,
            language_options=tuple(await self.translations.language_options()),
            timezone_options=timezone_options(),
        )
        logger.debug(
            "host_snapshot_loaded",
            stored_options=len(values),
            languages=len(snapshot.language_options),
        )
        return snapshot
