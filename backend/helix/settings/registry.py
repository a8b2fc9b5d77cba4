"""Settings schema registry: the catalog of every exposed setting."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from helix.settings.mapping import GMT_OFFSET_OPTION
from helix.settings.sanitize import sanitize_timezone
from helix.settings.schema import (
    EnumOption,
    SettingDefinition,
    SettingsSchema,
    SettingType,
)
from helix.settings.timezones import format_timezone

if TYPE_CHECKING:
    from helix.services.host import HostSnapshot

# Post-processing step applied to the computed allow-list
AllowListFilter = Callable[[set[str]], Iterable[str]]

POST_FORMATS = (
    "standard", "aside", "gallery", "image", "link", "quote", "status",
    "video", "audio", "chat",
)
USER_ROLES = ("subscriber", "contributor", "author", "editor", "administrator")
WEEKDAYS = (
    EnumOption(0, "Sunday"),
    EnumOption(1, "Monday"),
    EnumOption(2, "Tuesday"),
    EnumOption(3, "Wednesday"),
    EnumOption(4, "Thursday"),
    EnumOption(5, "Friday"),
    EnumOption(6, "Saturday"),
)


def _format_timezone_setting(value: Any, related: Mapping[str, Any]) -> str:
    return format_timezone(value, related.get(GMT_OFFSET_OPTION, ""))


def _category(name: str, *definitions: dict[str, Any]) -> dict[str, SettingDefinition]:
    settings = {}
    for fields in definitions:
        definition = SettingDefinition(category=name, **fields)
        settings[definition.key] = definition
    return settings


def build_schema(host: HostSnapshot) -> SettingsSchema:
    """Build the settings schema from a snapshot of host state.

    Args:
        host: Current host values used for dynamic defaults and choices.

    Returns:
        Ordered mapping of category to ordered mapping of key to definition.

    Raises:
        ValueError: If a key is defined in more than one category.
    """
    categories = {
        "site_information": _category(
            "site_information",
            dict(
                key="siteTitle",
                label="Site Title",
                description="In a few words, explain what this site is about.",
                type=SettingType.STRING,
                default=host.site_title,
            ),
            dict(
                key="tagline",
                label="Tagline",
                description="In a few words, explain what this site is about.",
                type=SettingType.STRING,
                default=host.tagline,
            ),
            dict(
                key="siteUrl",
                label="WordPress Address (URL)",
                description="The address of your WordPress core files.",
                type=SettingType.URL,
                default=host.site_url,
            ),
            dict(
                key="homeUrl",
                label="Site Address (URL)",
                description="The address you want people to type in their browser to reach your website.",
                type=SettingType.URL,
                default=host.home_url,
            ),
            dict(
                key="adminEmail",
                label="Administration Email Address",
                description="This address is used for admin purposes.",
                type=SettingType.EMAIL,
                default=host.admin_email,
            ),
            dict(
                key="language",
                label="Site Language",
                description="The language for your site.",
                type=SettingType.STRING,
                default=host.locale,
                enum=tuple(host.language_options),
            ),
            dict(
                key="timezone",
                label="Timezone",
                description="Choose either a city in the same timezone as you or a UTC timezone offset.",
                type=SettingType.STRING,
                default=host.timezone_string,
                enum=tuple(host.timezone_options),
                sanitize_override=sanitize_timezone,
                format_override=_format_timezone_setting,
                related_options=(GMT_OFFSET_OPTION,),
            ),
        ),
        "content_reading": _category(
            "content_reading",
            dict(
                key="showOnFront",
                label="Your homepage displays",
                description="What to show on the front page.",
                type=SettingType.STRING,
                enum=("posts", "page"),
                default="posts",
            ),
            dict(
                key="pageOnFront",
                label="Homepage",
                description="The page to show on the front page.",
                type=SettingType.INTEGER,
                default=0,
                min=0,
            ),
            dict(
                key="pageForPosts",
                label="Posts page",
                description="The page to show posts.",
                type=SettingType.INTEGER,
                default=0,
                min=0,
            ),
            dict(
                key="postsPerPage",
                label="Blog pages show at most",
                description="Number of posts to show per page.",
                type=SettingType.INTEGER,
                default=10,
                min=1,
            ),
            dict(
                key="blogPublic",
                label="Search engine visibility",
                description="Discourage search engines from indexing this site.",
                type=SettingType.BOOLEAN,
                default=True,
            ),
            dict(
                key="dateFormat",
                label="Date Format",
                description="Format for displaying dates.",
                type=SettingType.STRING,
                default=host.date_format,
            ),
            dict(
                key="timeFormat",
                label="Time Format",
                description="Format for displaying times.",
                type=SettingType.STRING,
                default=host.time_format,
            ),
            dict(
                key="startOfWeek",
                label="Week Starts On",
                description="The day of the week the calendar should start on.",
                type=SettingType.INTEGER,
                enum=WEEKDAYS,
                default=1,
                min=0,
                max=6,
            ),
        ),
        "writing_publishing": _category(
            "writing_publishing",
            dict(
                key="defaultCategory",
                label="Default Post Category",
                description="The default category for new posts.",
                type=SettingType.INTEGER,
                default=1,
                min=1,
            ),
            dict(
                key="defaultPostFormat",
                label="Default Post Format",
                description="The default format for new posts.",
                type=SettingType.STRING,
                enum=POST_FORMATS,
                default="standard",
            ),
            dict(
                key="useSmilies",
                label="Convert emoticons",
                description="Convert emoticons like :-) and :-P to graphics on display.",
                type=SettingType.BOOLEAN,
                default=True,
            ),
            dict(
                key="defaultCommentStatus",
                label="Default comment status",
                description="Allow people to submit comments on new posts.",
                type=SettingType.STRING,
                enum=("open", "closed"),
                default="open",
            ),
            dict(
                key="defaultPingStatus",
                label="Default ping status",
                description="Allow link notifications from other blogs (pingbacks and trackbacks) on new posts.",
                type=SettingType.STRING,
                enum=("open", "closed"),
                default="open",
            ),
        ),
        "media_assets": _category(
            "media_assets",
            dict(
                key="siteLogo",
                label="Site Logo",
                description="The site logo.",
                type=SettingType.INTEGER,
                default=0,
            ),
            dict(
                key="siteIcon",
                label="Site Icon",
                description="The site icon (favicon).",
                type=SettingType.INTEGER,
                default=0,
            ),
            dict(
                key="thumbnailSizeW",
                label="Thumbnail Width",
                description="Maximum width of thumbnail images.",
                type=SettingType.INTEGER,
                default=150,
                min=0,
            ),
            dict(
                key="thumbnailSizeH",
                label="Thumbnail Height",
                description="Maximum height of thumbnail images.",
                type=SettingType.INTEGER,
                default=150,
                min=0,
            ),
            dict(
                key="mediumSizeW",
                label="Medium Width",
                description="Maximum width of medium-sized images.",
                type=SettingType.INTEGER,
                default=300,
                min=0,
            ),
            dict(
                key="mediumSizeH",
                label="Medium Height",
                description="Maximum height of medium-sized images.",
                type=SettingType.INTEGER,
                default=300,
                min=0,
            ),
            dict(
                key="largeSizeW",
                label="Large Width",
                description="Maximum width of large images.",
                type=SettingType.INTEGER,
                default=1024,
                min=0,
            ),
            dict(
                key="largeSizeH",
                label="Large Height",
                description="Maximum height of large images.",
                type=SettingType.INTEGER,
                default=1024,
                min=0,
            ),
            dict(
                key="uploadsUseYearmonthFolders",
                label="Organize uploads into date-based folders",
                description="Organize my uploads into month- and year-based folders.",
                type=SettingType.BOOLEAN,
                default=True,
            ),
        ),
        "users_membership": _category(
            "users_membership",
            dict(
                key="usersCanRegister",
                label="Anyone can register",
                description="Allow anyone to register as a user.",
                type=SettingType.BOOLEAN,
                default=False,
            ),
            dict(
                key="defaultRole",
                label="New User Default Role",
                description="The default role for new users.",
                type=SettingType.STRING,
                enum=USER_ROLES,
                default="subscriber",
            ),
        ),
        "helix_specific": _category(
            "helix_specific",
            dict(
                key="helixUseDefaultAdmin",
                label="Use Default WordPress Admin",
                description="Use the default WordPress admin interface instead of Helix.",
                type=SettingType.BOOLEAN,
                default=False,
            ),
        ),
    }

    return freeze_schema(categories)


def freeze_schema(categories: Mapping[str, Mapping[str, SettingDefinition]]) -> SettingsSchema:
    """Check key uniqueness across categories and make the schema read-only.

    Raises:
        ValueError: If a key appears in more than one category.
    """
    seen: dict[str, str] = {}
    for category, settings in categories.items():
        for key in settings:
            if key in seen:
                raise ValueError(
                    f"Setting {key!r} defined in both {seen[key]!r} and {category!r}"
                )
            seen[key] = category

    return MappingProxyType(
        {name: MappingProxyType(dict(settings)) for name, settings in categories.items()}
    )


class SettingsRegistry:
    """Read-only lookup over a built settings schema.

    The allow-list is every defined key, passed through the injected
    filters in order. Filters may widen or narrow it.
    """

    def __init__(
        self,
        schema: SettingsSchema,
        allow_list_filters: Iterable[AllowListFilter] = (),
    ):
        self._schema = schema
        self._definitions: dict[str, SettingDefinition] = {
            key: definition
            for settings in schema.values()
            for key, definition in settings.items()
        }
        self._filters = tuple(allow_list_filters)
        self._allowed: frozenset[str] | None = None

    @classmethod
    def from_host(
        cls,
        host: HostSnapshot,
        allow_list_filters: Iterable[AllowListFilter] = (),
    ) -> SettingsRegistry:
        """Build a registry directly from a host snapshot."""
        return cls(build_schema(host), allow_list_filters)

    def get_schema(self) -> SettingsSchema:
        """Get the categorized schema."""
        return self._schema

    def definition(self, key: str) -> SettingDefinition | None:
        """Get the definition for a key, or None if undefined."""
        return self._definitions.get(key)

    def definitions(self) -> Iterator[SettingDefinition]:
        """Iterate definitions in category then declaration order."""
        return iter(self._definitions.values())

    def allowed_keys(self) -> frozenset[str]:
        """Get every key that may be read or written through the API."""
        if self._allowed is None:
            allowed = set(self._definitions)
            for allow_list_filter in self._filters:
                allowed = set(allow_list_filter(set(allowed)))
            self._allowed = frozenset(allowed)
        return self._allowed

    def is_allowed(self, key: str) -> bool:
        return key in self.allowed_keys()

    def describe(self) -> dict[str, dict[str, Any]]:
        """Describe each setting's transport contract for form builders.

        Returns:
            Mapping of key to ``type``, ``format``, ``description``,
            ``default`` and, where declared, ``enum``, ``minimum``, ``maximum``.
        """
        described: dict[str, dict[str, Any]] = {}
        for definition in self.definitions():
            entry: dict[str, Any] = {
                "category": definition.category,
                "label": definition.label,
                "description": definition.description,
                "type": definition.type.rest_type,
                "format": definition.type.value,
                "default": definition.default,
            }
            if definition.enum is not None and definition.sanitize_override is None:
                entry["enum"] = definition.enum_values
            if definition.min is not None:
                entry["minimum"] = definition.min
            if definition.max is not None:
                entry["maximum"] = definition.max
            described[definition.key] = entry
        return described
