"""Pytest configuration and fixtures."""

import io
import os
import tempfile
import zipfile
from pathlib import Path

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Create a temporary directory for test paths
_test_tmp_dir = tempfile.mkdtemp(prefix="helix_test_")

# Set config BEFORE importing app modules
os.environ["HELIX_CONFIG_PATH"] = str(Path(_test_tmp_dir) / "config")
os.environ["HELIX_LANGUAGES_PATH"] = str(Path(_test_tmp_dir) / "languages")
os.environ["HELIX_ADMIN_TOKEN"] = "test-admin-token"
os.environ["HELIX_SITE_URL"] = "https://example.org"

from helix.db.base import Base
from helix.db import models  # noqa: F401
from helix.services.host import HostSnapshot
from helix.services.options import OptionStore
from helix.services.settings import SettingsService
from helix.services.translations import TranslationService
from helix.settings.registry import SettingsRegistry
from helix.settings.schema import EnumOption
from helix.settings.timezones import timezone_options

TRANSLATIONS_API_URL = "https://translations.test/core/1.0/"


def make_language_pack(locale: str) -> bytes:
    """Build an in-memory language pack archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(f"{locale}.po", 'msgid ""\nmsgstr ""\n')
        zf.writestr(f"{locale}.mo", b"\xde\x12\x04\x95")
        zf.writestr(f"admin-{locale}.po", 'msgid ""\nmsgstr ""\n')
        zf.writestr("README.txt", "not a translation file")
    return buffer.getvalue()


TRANSLATIONS_PAYLOAD = {
    "translations": [
        {
            "language": "de_DE",
            "english_name": "German",
            "native_name": "Deutsch",
            "package": "https://downloads.test/translation/core/de_DE.zip",
        },
        {
            "language": "fr_FR",
            "english_name": "French (France)",
            "native_name": "Français",
            "package": "https://downloads.test/translation/core/fr_FR.zip",
        },
        {
            "language": "ja",
            "english_name": "Japanese",
            "native_name": "日本語",
            "package": "https://downloads.test/translation/core/missing.zip",
        },
    ]
}


def translations_handler(request: httpx.Request) -> httpx.Response:
    """Fake translations API and pack downloads."""
    url = str(request.url)
    if url.startswith(TRANSLATIONS_API_URL):
        return httpx.Response(200, json=TRANSLATIONS_PAYLOAD)
    if url.endswith("/de_DE.zip"):
        return httpx.Response(200, content=make_language_pack("de_DE"))
    if url.endswith("/fr_FR.zip"):
        return httpx.Response(200, content=make_language_pack("fr_FR"))
    return httpx.Response(404)


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
async def db_engine():
    """Create an in-memory test database engine."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


@pytest.fixture
def store(db_session) -> OptionStore:
    """Option store over the test session."""
    return OptionStore(db_session)


# =============================================================================
# Translations and settings
# =============================================================================


@pytest.fixture
def languages_dir(tmp_path) -> Path:
    """Empty languages directory."""
    path = tmp_path / "languages"
    path.mkdir()
    return path


@pytest.fixture
async def translations(languages_dir):
    """Translation service backed by a fake translations API."""
    TranslationService.clear_cache()
    client = httpx.AsyncClient(transport=httpx.MockTransport(translations_handler))
    service = TranslationService(
        languages_path=languages_dir,
        api_url=TRANSLATIONS_API_URL,
        version="6.5",
        client=client,
    )
    yield service
    await client.aclose()
    TranslationService.clear_cache()


@pytest.fixture
def host() -> HostSnapshot:
    """Host snapshot with fixed dynamic defaults."""
    return HostSnapshot(
        site_title="Helix Test Site",
        tagline="Just another site",
        site_url="https://example.org",
        home_url="https://example.org",
        admin_email="admin@example.org",
        locale="",
        timezone_string="",
        language_options=(
            EnumOption(value="", label="English (United States)"),
            EnumOption(value="de_DE", label="Deutsch (Not Installed)", installed=False),
            EnumOption(value="fr_FR", label="Français (Not Installed)", installed=False),
            EnumOption(value="ja", label="日本語 (Not Installed)", installed=False),
        ),
        timezone_options=timezone_options(),
    )


@pytest.fixture
def registry(host) -> SettingsRegistry:
    """Registry built from the test host snapshot."""
    return SettingsRegistry.from_host(host)


@pytest.fixture
def service(store, registry, translations) -> SettingsService:
    """Settings service wired to the test store and fake translations."""
    return SettingsService(store, registry, translations)


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp directories after test session."""
    import shutil

    if Path(_test_tmp_dir).exists():
        shutil.rmtree(_test_tmp_dir, ignore_errors=True)

