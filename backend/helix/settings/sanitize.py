"""Type-based sanitization and validation of setting values.

Each setting type has a coercion function mirroring the host's own
sanitizers (``sanitize_text_field``, ``sanitize_email``/``is_email``,
``esc_url_raw``, ``absint``, ``floatval``, ``rest_sanitize_boolean``).
Enumerated settings are then checked for membership. Numeric ``min``/``max``
bounds are advisory metadata and are not enforced here.
"""

from __future__ import annotations

import html
import math
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from helix.settings.exceptions import (
    InvalidEmailError,
    InvalidEnumValueError,
    InvalidSettingError,
    InvalidTimezoneError,
)
from helix.settings.schema import SettingType
from helix.settings.timezones import (
    MAX_OFFSET,
    MIN_OFFSET,
    is_known_timezone,
    parse_timezone,
)

if TYPE_CHECKING:
    from helix.settings.registry import SettingsRegistry

# Leading numeric prefix, as PHP's intval/floatval read strings
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_LESS_THAN_CHUNK = re.compile(r"<[^>]*?((?=<)|>|$)")
_SCRIPT_STYLE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE_RUN = re.compile(r"[\r\n\t ]+")
_PERCENT_OCTET = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)

_EMAIL_LOCAL_DISALLOWED = re.compile(r"[^a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]")
_EMAIL_LOCAL_VALID = re.compile(r"^[a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]+$")
_EMAIL_SUB_DISALLOWED = re.compile(r"[^a-z0-9-]+", re.IGNORECASE)
_EMAIL_SUB_VALID = re.compile(r"^[a-z0-9-]+$", re.IGNORECASE)
_EMAIL_TRIM = " \t\n\r\0\x0b"

_URL_DISALLOWED = re.compile(r"[^a-z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\U0010ffff]", re.IGNORECASE)
_URL_SCHEME = re.compile(r"^([^:/?#]+):")
_URL_LINE_BREAK = re.compile(r"%0[ad]", re.IGNORECASE)
_PHP_FILE = re.compile(r"^[a-z0-9-]+?\.php", re.IGNORECASE)

ALLOWED_PROTOCOLS = frozenset(
    {
        "http", "https", "ftp", "ftps", "mailto", "news", "irc", "irc6",
        "ircs", "gopher", "nntp", "feed", "telnet", "mms", "rtsp", "sms",
        "svn", "tel", "fax", "xmpp", "webcal", "urn",
    }
)


def _to_text(value: Any) -> str:
    """Cast a scalar to text the way the host does; containers become ''."""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (str, int)):
        return str(value)
    return ""


def sanitize_text_field(value: Any) -> str:
    """Reduce a value to a single line of plain text."""
    text = _to_text(value)

    if "<" in text:
        text = _LESS_THAN_CHUNK.sub(
            lambda m: m.group(0) if m.group(0).endswith(">") else html.escape(m.group(0)),
            text,
        )
        text = _SCRIPT_STYLE.sub("", text)
        text = _TAG.sub("", text)
        text = text.replace("<\n", "&lt;\n")

    text = _WHITESPACE_RUN.sub(" ", text).strip()

    found = False
    while _PERCENT_OCTET.search(text):
        text = _PERCENT_OCTET.sub("", text)
        found = True
    if found:
        text = re.sub(r" +", " ", text).strip()

    return text


def sanitize_email(value: Any) -> str:
    """Strip characters that are not allowed in an email address.

    Returns '' when nothing address-shaped is left.
    """
    email = _to_text(value).strip()
    if len(email) < 6 or "@" not in email[1:]:
        return ""

    local, domain = email.split("@", 1)
    local = _EMAIL_LOCAL_DISALLOWED.sub("", local)
    if not local:
        return ""

    domain = re.sub(r"\.{2,}", "", domain).strip(_EMAIL_TRIM + ".")
    if not domain:
        return ""

    subs = []
    for sub in domain.split("."):
        sub = _EMAIL_SUB_DISALLOWED.sub("", sub.strip(_EMAIL_TRIM + "-"))
        if sub:
            subs.append(sub)
    if len(subs) < 2:
        return ""

    return f"{local}@{'.'.join(subs)}"


def is_email(email: str) -> bool:
    """Check that a string has the shape of an email address."""
    if len(email) < 6 or "@" not in email[1:]:
        return False

    local, domain = email.split("@", 1)
    if not _EMAIL_LOCAL_VALID.match(local):
        return False
    if re.search(r"\.{2,}", domain):
        return False
    if domain.strip(_EMAIL_TRIM + ".") != domain:
        return False

    subs = domain.split(".")
    if len(subs) < 2:
        return False
    for sub in subs:
        if sub.strip(_EMAIL_TRIM + "-") != sub or not _EMAIL_SUB_VALID.match(sub):
            return False
    return True


def esc_url_raw(value: Any) -> str:
    """Clean a URL for storage, rejecting disallowed schemes."""
    url = _to_text(value).lstrip()
    if not url:
        return ""

    url = _URL_DISALLOWED.sub("", url.replace(" ", "%20"))
    while _URL_LINE_BREAK.search(url):
        url = _URL_LINE_BREAK.sub("", url)
    if not url:
        return ""

    if ":" not in url and url[0] not in "/#?" and not _PHP_FILE.match(url):
        url = "http://" + url

    if url.startswith("/"):
        return url

    scheme = _URL_SCHEME.match(url)
    if scheme and scheme.group(1).lower() not in ALLOWED_PROTOCOLS:
        return ""
    return url


def intval(value: Any) -> int:
    """Read an integer from a scalar; unreadable input is 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if not match:
            return 0
        number = match.group(0)
        if any(c in number for c in ".eE"):
            parsed = float(number)
            return int(parsed) if math.isfinite(parsed) else 0
        return int(number)
    return 0


def absint(value: Any) -> int:
    """Coerce to a non-negative whole number."""
    return abs(intval(value))


def floatval(value: Any) -> float:
    """Coerce to a float; unreadable input is 0.0."""
    if isinstance(value, (bool, int)):
        return float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        return float(match.group(0)) if match else 0.0
    return 0.0


def rest_sanitize_boolean(value: Any) -> bool:
    """Coerce to a strict boolean.

    The strings "false" and "0" (any case) and falsy scalars are False;
    every other value, including arbitrary strings, is True.
    """
    if isinstance(value, str):
        value = value.lower()
        if value in ("false", "0"):
            return False
    return bool(value)


def _sanitize_email_checked(value: Any) -> str:
    email = sanitize_email(value)
    if not is_email(email):
        raise InvalidEmailError()
    return email


SANITIZERS: dict[SettingType, Callable[[Any], Any]] = {
    SettingType.STRING: sanitize_text_field,
    SettingType.EMAIL: _sanitize_email_checked,
    SettingType.URL: esc_url_raw,
    SettingType.INTEGER: absint,
    SettingType.NUMBER: floatval,
    SettingType.BOOLEAN: rest_sanitize_boolean,
}


def sanitize_timezone(value: Any) -> str:
    """Validate a timezone value in any of its three accepted forms.

    Raises:
        InvalidTimezoneError: If the value is not an offset within
            -12..+14 hours or a known timezone identifier.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidTimezoneError(value)

    text = sanitize_text_field(value)
    if not text:
        raise InvalidTimezoneError(value)

    parsed = parse_timezone(text)
    if parsed.is_offset:
        if not MIN_OFFSET <= parsed.gmt_offset <= MAX_OFFSET:
            raise InvalidTimezoneError(value)
    elif not is_known_timezone(parsed.timezone_string):
        raise InvalidTimezoneError(value)
    return text


def _strict_member(value: Any, allowed: list[Any]) -> bool:
    return any(type(value) is type(option) and value == option for option in allowed)


def sanitize(registry: SettingsRegistry, setting: str, value: Any) -> Any:
    """Sanitize and validate a raw value for a setting.

    Args:
        registry: Registry holding the setting definitions.
        setting: Public setting key.
        value: Raw value from the request.

    Returns:
        The sanitized value.

    Raises:
        InvalidSettingError: If the key has no definition.
        SettingValidationError: If the value fails validation.
    """
    definition = registry.definition(setting)
    if definition is None:
        raise InvalidSettingError(setting)

    if definition.sanitize_override is not None:
        return definition.sanitize_override(value)

    sanitizer = SANITIZERS.get(definition.type, sanitize_text_field)
    sanitized = sanitizer(value)

    allowed = definition.enum_values
    if allowed is not None and not _strict_member(sanitized, allowed):
        raise InvalidEnumValueError(setting, allowed)

    return sanitized
