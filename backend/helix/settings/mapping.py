"""Mapping between public setting keys and option names."""

from __future__ import annotations

from types import MappingProxyType

OPTION_MAPPING: MappingProxyType[str, str] = MappingProxyType(
    {
        "siteTitle": "blogname",
        "tagline": "blogdescription",
        "siteUrl": "siteurl",
        "homeUrl": "home",
        "adminEmail": "admin_email",
        "language": "WPLANG",
        "timezone": "timezone_string",
        "dateFormat": "date_format",
        "timeFormat": "time_format",
        "startOfWeek": "start_of_week",
        "postsPerPage": "posts_per_page",
        "showOnFront": "show_on_front",
        "pageOnFront": "page_on_front",
        "pageForPosts": "page_for_posts",
        "defaultCategory": "default_category",
        "defaultPostFormat": "default_post_format",
        "useSmilies": "use_smilies",
        "defaultCommentStatus": "default_comment_status",
        "defaultPingStatus": "default_ping_status",
        "siteLogo": "site_logo",
        "siteIcon": "site_icon",
        "thumbnailSizeW": "thumbnail_size_w",
        "thumbnailSizeH": "thumbnail_size_h",
        "mediumSizeW": "medium_size_w",
        "mediumSizeH": "medium_size_h",
        "largeSizeW": "large_size_w",
        "largeSizeH": "large_size_h",
        "uploadsUseYearmonthFolders": "uploads_use_yearmonth_folders",
        "usersCanRegister": "users_can_register",
        "defaultRole": "default_role",
        "blogPublic": "blog_public",
        "helixUseDefaultAdmin": "helix_use_default_admin",
    }
)

# Numeric UTC offset; mutually exclusive with timezone_string
GMT_OFFSET_OPTION = "gmt_offset"


def resolve_store_key(setting: str) -> str:
    """Get the option name a setting is stored under.

    Keys without an explicit mapping are stored under their own name.
    """
    return OPTION_MAPPING.get(setting, setting)
