"""Translation service: installed languages, available packs and installation."""

from __future__ import annotations

import asyncio
import io
import time
import zipfile
from pathlib import Path, PurePosixPath
from typing import Any

import httpx

from helix.core.config import settings
from helix.core.logging import get_logger
from helix.settings.schema import EnumOption

logger = get_logger(__name__)

DEFAULT_LANGUAGE_LABEL = "English (United States)"
NOT_INSTALLED_SUFFIX = " (Not Installed)"

# Used when the translations API cannot be reached
FALLBACK_LANGUAGES: dict[str, str] = {
    "en_GB": "English (United Kingdom)",
    "es_ES": "Español",
    "fr_FR": "Français",
    "de_DE": "Deutsch",
    "it_IT": "Italiano",
    "pt_BR": "Português do Brasil",
    "ru_RU": "Русский",
    "ja": "日本語",
    "zh_CN": "简体中文",
    "ar": "العربية",
    "hi_IN": "हिन्दी",
    "ko_KR": "한국어",
    "nl_NL": "Nederlands",
    "sv_SE": "Svenska",
    "da_DK": "Dansk",
    "fi": "Suomi",
    "no": "Norsk",
    "pl_PL": "Polski",
    "tr_TR": "Türkçe",
}

# Files a language pack may contain
PACK_FILE_SUFFIXES = (".po", ".mo", ".json", ".l10n.php")


class TranslationService:
    """Looks up and installs core language packs.

    Installed languages are the ``<locale>.mo`` files in the languages
    directory. Available languages come from the translations API and are
    cached in memory for ``translations_cache_ttl`` seconds. A failed lookup
    is cached as empty for ``translations_failure_ttl`` seconds.
    """

    # Class-level cache shared across instances: url -> (packs, expires_at)
    _cache: dict[str, tuple[dict[str, dict[str, Any]], float]] = {}

    def __init__(
        self,
        languages_path: Path | None = None,
        api_url: str | None = None,
        version: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.languages_path = Path(languages_path or settings.languages_path)
        self.api_url = api_url or settings.translations_api_url
        self.version = version or settings.wp_version
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=settings.http_timeout,
                follow_redirects=True,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def installed_languages(self) -> list[str]:
        """Get the locales that have a compiled translation installed."""
        if not self.languages_path.is_dir():
            return []
        return sorted(path.stem for path in self.languages_path.glob("*.mo"))

    def is_installed(self, locale: str) -> bool:
        """Check whether a locale can be activated without an install.

        The empty locale is the built-in English (United States).
        """
        if not locale:
            return True
        return (self.languages_path / f"{locale}.mo").is_file()

    async def available_translations(self) -> dict[str, dict[str, Any]]:
        """Get the language packs offered by the translations API.

        Returns:
            Mapping of locale to pack metadata (``native_name``, ``package``).
            Empty if the API is unreachable or returns garbage.
        """
        cache_key = f"{self.api_url}?version={self.version}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            packs, expires_at = cached
            if time.time() < expires_at:
                return packs
            del self._cache[cache_key]

        client = await self._get_client()
        try:
            response = await client.get(self.api_url, params={"version": self.version})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("translations_fetch_failed", url=self.api_url, error=str(e))
            # Failed lookups are cached as empty for a shorter time
            self._cache[cache_key] = ({}, time.time() + settings.translations_failure_ttl)
            return {}

        packs: dict[str, dict[str, Any]] = {}
        for entry in data.get("translations", []) if isinstance(data, dict) else []:
            if isinstance(entry, dict) and entry.get("language"):
                packs[entry["language"]] = entry

        self._cache[cache_key] = (packs, time.time() + settings.translations_cache_ttl)
        logger.debug("translations_fetched", count=len(packs))
        return packs

    async def language_options(self) -> list[EnumOption]:
        """Build the language choices, marking which are installed."""
        installed = set(self.installed_languages())
        options = [EnumOption(value="", label=DEFAULT_LANGUAGE_LABEL)]

        packs = await self.available_translations()
        if packs:
            names = {
                locale: pack.get("native_name") or locale
                for locale, pack in packs.items()
            }
        else:
            names = FALLBACK_LANGUAGES

        for locale, name in names.items():
            is_installed = locale in installed
            options.append(
                EnumOption(
                    value=locale,
                    label=name if is_installed else name + NOT_INSTALLED_SUFFIX,
                    installed=is_installed,
                )
            )
        return options

    async def install(self, locale: str) -> bool:
        """Download and install a core language pack.

        Args:
            locale: Locale to install (e.g. ``de_DE``).

        Returns:
            True if ``<locale>.po`` exists after installation.
        """
        if not settings.allow_language_install:
            logger.info("language_install_disabled", locale=locale)
            return False

        packs = await self.available_translations()
        pack = packs.get(locale)
        if pack is None or not pack.get("package"):
            logger.warning("language_pack_not_found", locale=locale)
            return False

        client = await self._get_client()
        try:
            response = await client.get(pack["package"])
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("language_pack_download_failed", locale=locale, error=str(e))
            return False

        try:
            extracted = await asyncio.to_thread(self._extract_pack, response.content)
        except (zipfile.BadZipFile, OSError) as e:
            logger.warning("language_pack_extract_failed", locale=locale, error=str(e))
            return False

        installed = (self.languages_path / f"{locale}.po").is_file()
        logger.info(
            "language_pack_installed" if installed else "language_pack_incomplete",
            locale=locale,
            files=extracted,
        )
        return installed

    def _extract_pack(self, data: bytes) -> list[str]:
        """Extract translation files from a pack archive into the languages dir."""
        self.languages_path.mkdir(parents=True, exist_ok=True)
        extracted = []
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            for member in zf.infolist():
                if member.is_dir():
                    continue
                name = PurePosixPath(member.filename).name
                if not name or name.startswith(".") or not name.endswith(PACK_FILE_SUFFIXES):
                    continue
                (self.languages_path / name).write_bytes(zf.read(member))
                extracted.append(name)
        return extracted

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the available translations cache (useful for testing)."""
        cls._cache.clear()
