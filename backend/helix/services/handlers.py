"""Write strategies for settings: the generic option write and special cases.

Every handler exposes ``update(setting, value)`` taking an already sanitized
value and returning the value as it now reads back. The settings service
resolves one handler per key from ``SPECIAL_HANDLERS`` and falls back to
``OptionHandler``.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from helix.core.logging import get_logger
from helix.services.options import OptionStore
from helix.services.translations import TranslationService
from helix.settings.exceptions import LanguagePackUnavailableError, UpdateFailedError
from helix.settings.mapping import GMT_OFFSET_OPTION, resolve_store_key
from helix.settings.timezones import format_offset, parse_timezone

logger = get_logger(__name__)

_MISSING = object()

# One lock per setting key; serializes multi-option writes within the process
_KEY_LOCKS: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)


def key_lock(setting: str) -> asyncio.Lock:
    """Get the lock that serializes updates of one setting."""
    return _KEY_LOCKS[setting]


class OptionHandler:
    """Writes a setting to its mapped option."""

    def __init__(self, store: OptionStore, translations: TranslationService | None = None):
        self.store = store
        self.translations = translations

    async def update(self, setting: str, value: Any) -> Any:
        """Write a sanitized value.

        Raises:
            UpdateFailedError: If the write did not take effect.
        """
        await self._write(setting, resolve_store_key(setting), value)
        return value

    async def _write(self, setting: str, option: str, value: Any) -> bool:
        """Write one option, treating an unchanged value as success.

        Returns:
            True if a row was written, False if the option already held value.
        """
        if await self.store.update(option, value):
            return True
        if await self.store.get(option, _MISSING) != value:
            raise UpdateFailedError(setting)
        return False


class TimezoneHandler(OptionHandler):
    """Keeps the city timezone and the numeric offset mutually exclusive.

    Offset forms write ``gmt_offset`` and clear ``timezone_string``; city
    forms do the reverse. Both writes share the request's transaction.
    """

    async def update(self, setting: str, value: Any) -> str:
        parsed = parse_timezone(str(value))
        city_option = resolve_store_key(setting)

        async with key_lock(setting):
            if parsed.is_offset:
                await self._write(setting, GMT_OFFSET_OPTION, parsed.gmt_offset)
                await self._write(setting, city_option, "")
                result = format_offset(parsed.gmt_offset)
            else:
                await self._write(setting, city_option, parsed.timezone_string)
                await self._write(setting, GMT_OFFSET_OPTION, "")
                result = parsed.timezone_string

        logger.info(
            "timezone_updated",
            mode="offset" if parsed.is_offset else "city",
            value=result,
        )
        return result


class LanguageHandler(OptionHandler):
    """Switches the site locale, installing its language pack when missing.

    A locale whose translation is not installed cannot be written. In that
    case the pack is installed and the write retried exactly once.
    """

    async def update(self, setting: str, value: Any) -> str:
        locale = str(value)
        option = resolve_store_key(setting)

        async with key_lock(setting):
            if await self._try_write(setting, option, locale):
                return locale

            logger.info("language_pack_missing", locale=locale)
            if self.translations is not None and await self.translations.install(locale):
                if await self._try_write(setting, option, locale):
                    logger.info("language_installed_and_set", locale=locale)
                    return locale

        logger.warning("language_pack_unavailable", locale=locale)
        raise LanguagePackUnavailableError(locale)

    async def _try_write(self, setting: str, option: str, locale: str) -> bool:
        if self.translations is not None and not self.translations.is_installed(locale):
            return False
        await self._write(setting, option, locale)
        return True


HandlerFactory = Callable[[OptionStore, TranslationService], OptionHandler]

# Settings whose update needs more than a single option write
SPECIAL_HANDLERS: dict[str, HandlerFactory] = {
    "timezone": TimezoneHandler,
    "language": LanguageHandler,
}
