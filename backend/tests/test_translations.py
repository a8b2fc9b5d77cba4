"""Tests for the translation service."""

import httpx
import pytest

from helix.core.config import settings
from helix.services.translations import (
    DEFAULT_LANGUAGE_LABEL,
    FALLBACK_LANGUAGES,
    TranslationService,
)

from conftest import TRANSLATIONS_API_URL, make_language_pack


@pytest.fixture
async def offline_translations(languages_dir):
    """Translation service whose API always fails."""
    TranslationService.clear_cache()
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(503))
    )
    service = TranslationService(
        languages_path=languages_dir,
        api_url=TRANSLATIONS_API_URL,
        version="6.5",
        client=client,
    )
    yield service
    await client.aclose()
    TranslationService.clear_cache()


class TestInstalledLanguages:
    """Tests for detecting installed translations."""

    async def test_empty_directory(self, translations):
        assert translations.installed_languages() == []

    def test_missing_directory(self, tmp_path):
        service = TranslationService(languages_path=tmp_path / "nope")
        assert service.installed_languages() == []

    async def test_compiled_files_count(self, translations, languages_dir):
        (languages_dir / "de_DE.mo").write_bytes(b"")
        (languages_dir / "fr_FR.po").write_text("")

        assert translations.installed_languages() == ["de_DE"]
        assert translations.is_installed("de_DE")
        assert not translations.is_installed("fr_FR")

    async def test_default_locale_always_installed(self, translations):
        assert translations.is_installed("")


class TestAvailableTranslations:
    """Tests for reading the translations API."""

    async def test_fetches_packs(self, translations):
        packs = await translations.available_translations()

        assert list(packs) == ["de_DE", "fr_FR", "ja"]
        assert packs["de_DE"]["native_name"] == "Deutsch"

    async def test_cached_between_instances(self, translations, languages_dir):
        calls = []

        def counting_handler(request):
            calls.append(request.url)
            return httpx.Response(200, json={"translations": []})

        await translations.available_translations()

        client = httpx.AsyncClient(transport=httpx.MockTransport(counting_handler))
        other = TranslationService(
            languages_path=languages_dir,
            api_url=TRANSLATIONS_API_URL,
            version="6.5",
            client=client,
        )
        packs = await other.available_translations()
        await client.aclose()

        assert calls == []
        assert "de_DE" in packs

    async def test_api_failure_returns_empty(self, offline_translations):
        assert await offline_translations.available_translations() == {}

    async def test_failure_cached_briefly(self, languages_dir):
        TranslationService.clear_cache()
        calls = []

        def failing_handler(request):
            calls.append(request.url)
            return httpx.Response(503)

        async with httpx.AsyncClient(transport=httpx.MockTransport(failing_handler)) as client:
            service = TranslationService(
                languages_path=languages_dir,
                api_url=TRANSLATIONS_API_URL,
                version="6.5",
                client=client,
            )
            assert await service.available_translations() == {}
            assert await service.available_translations() == {}

        assert len(calls) == 1
        TranslationService.clear_cache()

    async def test_failure_retried_after_failure_ttl(self, languages_dir, monkeypatch):
        TranslationService.clear_cache()
        monkeypatch.setattr(settings, "translations_failure_ttl", 0)
        responses = iter([httpx.Response(503), httpx.Response(200, json={"translations": [
            {"language": "de_DE", "native_name": "Deutsch"}
        ]})])

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: next(responses))
        ) as client:
            service = TranslationService(
                languages_path=languages_dir,
                api_url=TRANSLATIONS_API_URL,
                version="6.5",
                client=client,
            )
            assert await service.available_translations() == {}
            assert list(await service.available_translations()) == ["de_DE"]

        TranslationService.clear_cache()


class TestLanguageOptions:
    """Tests for the language choices."""

    async def test_default_first(self, translations):
        options = await translations.language_options()

        assert options[0].value == ""
        assert options[0].label == DEFAULT_LANGUAGE_LABEL
        assert options[0].installed is None

    async def test_not_installed_suffix(self, translations, languages_dir):
        (languages_dir / "fr_FR.mo").write_bytes(b"")

        options = {option.value: option for option in await translations.language_options()}

        assert options["de_DE"].label == "Deutsch (Not Installed)"
        assert options["de_DE"].installed is False
        assert options["fr_FR"].label == "Français"
        assert options["fr_FR"].installed is True

    async def test_fallback_list_when_offline(self, offline_translations):
        options = await offline_translations.language_options()

        assert [option.value for option in options[1:]] == list(FALLBACK_LANGUAGES)
        assert all(option.label.endswith("(Not Installed)") for option in options[1:])


class TestInstall:
    """Tests for downloading and installing language packs."""

    async def test_install_extracts_translation_files(self, translations, languages_dir):
        assert await translations.install("de_DE") is True

        files = sorted(path.name for path in languages_dir.iterdir())
        assert files == ["admin-de_DE.po", "de_DE.mo", "de_DE.po"]
        assert translations.is_installed("de_DE")

    async def test_download_failure(self, translations, languages_dir):
        assert await translations.install("ja") is False
        assert not translations.is_installed("ja")

    async def test_unknown_locale(self, translations):
        assert await translations.install("xx_XX") is False

    async def test_offline(self, offline_translations):
        assert await offline_translations.install("de_DE") is False

    async def test_corrupt_archive(self, languages_dir):
        TranslationService.clear_cache()

        def handler(request):
            if str(request.url).startswith(TRANSLATIONS_API_URL):
                return httpx.Response(
                    200,
                    json={"translations": [
                        {"language": "de_DE", "package": "https://downloads.test/de_DE.zip"}
                    ]},
                )
            return httpx.Response(200, content=b"not a zip")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            service = TranslationService(
                languages_path=languages_dir,
                api_url=TRANSLATIONS_API_URL,
                version="6.5",
                client=client,
            )
            assert await service.install("de_DE") is False
        TranslationService.clear_cache()

    async def test_only_translation_files_extracted(self, translations, languages_dir):
        translations._extract_pack(make_language_pack("fr_FR"))

        assert (languages_dir / "fr_FR.po").is_file()
        assert not (languages_dir / "README.txt").exists()

    async def test_install_disabled(self, translations, languages_dir, monkeypatch):
        monkeypatch.setattr(settings, "allow_language_install", False)

        assert await translations.install("de_DE") is False
        assert list(languages_dir.iterdir()) == []


class TestClientLifecycle:
    """Tests for HTTP client ownership."""

    async def test_injected_client_not_closed(self, translations):
        client = await translations._get_client()
        await translations.close()

        assert not client.is_closed

    async def test_owned_client_closed(self, tmp_path):
        service = TranslationService(languages_path=tmp_path)
        client = await service._get_client()
        await service.close()

        assert client.is_closed
