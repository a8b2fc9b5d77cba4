"""Tests for the settings schema registry and key mapping."""

from __future__ import annotations

import pytest

from helix.services.host import HostSnapshot
from helix.settings.mapping import OPTION_MAPPING, resolve_store_key
from helix.settings.registry import SettingsRegistry, build_schema, freeze_schema
from helix.settings.schema import EnumOption, SettingDefinition, SettingType


class TestKeyMapper:
    """Tests for setting key to option name resolution."""

    def test_explicit_mappings(self):
        assert resolve_store_key("siteTitle") == "blogname"
        assert resolve_store_key("language") == "WPLANG"
        assert resolve_store_key("timezone") == "timezone_string"

    def test_unmapped_key_maps_to_itself(self):
        assert resolve_store_key("customThing") == "customThing"
        assert resolve_store_key("") == ""

    def test_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            OPTION_MAPPING["siteTitle"] = "other"  # type: ignore[index]

    def test_every_setting_is_mapped(self, registry):
        for definition in registry.definitions():
            assert definition.key in OPTION_MAPPING


class TestBuildSchema:
    """Tests for schema construction."""

    def test_categories_in_order(self, registry):
        assert list(registry.get_schema()) == [
            "site_information",
            "content_reading",
            "writing_publishing",
            "media_assets",
            "users_membership",
            "helix_specific",
        ]

    def test_keys_stable_within_category(self, registry):
        assert list(registry.get_schema()["site_information"]) == [
            "siteTitle",
            "tagline",
            "siteUrl",
            "homeUrl",
            "adminEmail",
            "language",
            "timezone",
        ]

    def test_definitions_carry_their_category(self, registry):
        for category, definitions in registry.get_schema().items():
            for definition in definitions.values():
                assert definition.category == category

    def test_dynamic_defaults_come_from_snapshot(self):
        host = HostSnapshot(
            site_title="Snapshot Title",
            admin_email="owner@example.net",
            locale="de_DE",
            timezone_string="Europe/Berlin",
            date_format="d.m.Y",
        )
        registry = SettingsRegistry.from_host(host)

        assert registry.definition("siteTitle").default == "Snapshot Title"
        assert registry.definition("adminEmail").default == "owner@example.net"
        assert registry.definition("language").default == "de_DE"
        assert registry.definition("timezone").default == "Europe/Berlin"
        assert registry.definition("dateFormat").default == "d.m.Y"

    def test_unset_timezone_default_is_empty(self):
        # An empty city lets a stored offset show through when reading
        registry = SettingsRegistry.from_host(HostSnapshot())
        assert registry.definition("timezone").default == ""

    def test_language_choices_from_snapshot(self, registry):
        values = registry.definition("language").enum_values
        assert values == ["", "de_DE", "fr_FR", "ja"]

    def test_schema_is_immutable(self, registry):
        schema = registry.get_schema()
        with pytest.raises(TypeError):
            schema["site_information"]["siteTitle"] = None  # type: ignore[index]
        with pytest.raises(AttributeError):
            schema["site_information"]["siteTitle"].default = "changed"

    def test_building_twice_gives_equal_schemas(self, host):
        assert dict(build_schema(host)["media_assets"]) == dict(build_schema(host)["media_assets"])

    def test_duplicate_keys_rejected(self):
        definition = SettingDefinition(
            key="siteTitle",
            category="a",
            label="Title",
            description="",
            type=SettingType.STRING,
        )
        with pytest.raises(ValueError, match="siteTitle"):
            freeze_schema({"a": {"siteTitle": definition}, "b": {"siteTitle": definition}})


class TestEnumDefinitions:
    """Tests for enum unwrapping."""

    def test_raw_and_labelled_values(self):
        definition = SettingDefinition(
            key="mixed",
            category="c",
            label="Mixed",
            description="",
            type=SettingType.STRING,
            enum=("a", EnumOption("b", "Bee"), {"value": "c", "label": "Sea"}),
        )
        assert definition.enum_values == ["a", "b", "c"]
        assert definition.enum_options() == [
            "a",
            {"value": "b", "label": "Bee"},
            {"value": "c", "label": "Sea"},
        ]

    def test_installed_metadata_in_options(self, registry):
        options = registry.definition("language").enum_options()
        assert options[0] == {"value": "", "label": "English (United States)"}
        assert options[1]["installed"] is False

    def test_not_enumerated(self, registry):
        assert registry.definition("siteTitle").enum_values is None
        assert registry.definition("siteTitle").enum_options() is None


class TestAllowList:
    """Tests for the allow-list and its injected filters."""

    def test_all_schema_keys_allowed(self, registry):
        allowed = registry.allowed_keys()
        assert "siteTitle" in allowed
        assert "helixUseDefaultAdmin" in allowed
        assert len(allowed) == len(list(registry.definitions()))

    def test_filter_widens(self, host):
        registry = SettingsRegistry.from_host(host, [lambda keys: keys | {"customOption"}])

        assert registry.is_allowed("customOption")
        assert registry.definition("customOption") is None

    def test_filters_apply_in_order(self, host):
        registry = SettingsRegistry.from_host(
            host,
            [
                lambda keys: keys | {"extra"},
                lambda keys: {key for key in keys if key not in ("extra", "siteUrl")},
            ],
        )

        assert not registry.is_allowed("extra")
        assert not registry.is_allowed("siteUrl")
        assert registry.is_allowed("siteTitle")

    def test_filter_cannot_mutate_registry(self, host):
        def greedy(keys):
            keys.clear()
            return {"siteTitle"}

        registry = SettingsRegistry.from_host(host, [greedy])

        assert registry.allowed_keys() == frozenset({"siteTitle"})
        assert registry.definition("tagline") is not None


class TestDescribe:
    """Tests for the transport schema used by form builders."""

    def test_rest_types(self, registry):
        described = registry.describe()

        assert described["adminEmail"]["type"] == "string"
        assert described["adminEmail"]["format"] == "email"
        assert described["siteUrl"]["type"] == "string"
        assert described["postsPerPage"]["type"] == "integer"
        assert described["blogPublic"]["type"] == "boolean"

    def test_bounds_and_enum(self, registry):
        described = registry.describe()

        assert described["postsPerPage"]["minimum"] == 1
        assert "maximum" not in described["postsPerPage"]
        assert described["startOfWeek"]["enum"] == [0, 1, 2, 3, 4, 5, 6]
        assert described["startOfWeek"]["maximum"] == 6

    def test_timezone_enum_not_advertised(self, registry):
        # Offsets outside the listed choices are accepted, so no enum is published
        assert "enum" not in registry.describe()["timezone"]
