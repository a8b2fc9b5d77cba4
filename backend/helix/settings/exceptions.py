"""Custom exceptions for settings access and updates."""

from __future__ import annotations


class SettingsError(Exception):
    """Base exception for settings errors.

    Attributes:
        message: Human-readable description shown to the caller.
        code: Stable machine-readable error code.
        status: HTTP status the API boundary reports this error with.
    """

    status: int = 400

    def __init__(self, message: str, code: str = "SETTINGS_ERROR", status: int | None = None):
        self.message = message
        self.code = code
        if status is not None:
            self.status = status
        super().__init__(message)


class InvalidSettingError(SettingsError):
    """Raised when a key has no definition in the settings schema."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Invalid setting: {setting}", "INVALID_SETTING", 400)


class SettingNotAllowedError(SettingsError):
    """Raised when a key is not in the allow-list."""

    def __init__(self, setting: str, action: str = "accessed"):
        self.setting = setting
        super().__init__(
            f'Setting "{setting}" is not allowed to be {action}.',
            "SETTING_NOT_ALLOWED",
            403,
        )


class SettingValidationError(SettingsError):
    """Raised when a value fails type-specific validation."""

    def __init__(self, message: str, code: str = "INVALID_VALUE"):
        super().__init__(message, code, 400)


class InvalidEmailError(SettingValidationError):
    """Raised when an email setting does not hold a valid address."""

    def __init__(self, message: str = "Invalid email address."):
        super().__init__(message, "INVALID_EMAIL")


class InvalidEnumValueError(SettingValidationError):
    """Raised when a value is not one of the setting's allowed values."""

    def __init__(self, setting: str, allowed: list):
        self.setting = setting
        self.allowed = allowed
        allowed_text = ", ".join(str(value) for value in allowed)
        super().__init__(
            f"Invalid value for {setting}. Allowed values: {allowed_text}",
            "INVALID_ENUM_VALUE",
        )


class InvalidTimezoneError(SettingValidationError):
    """Raised when a timezone is neither a UTC offset nor a known zone."""

    def __init__(self, value: object):
        super().__init__(
            f'Invalid timezone "{value}". Use a city such as "Europe/London", '
            'a UTC offset such as "UTC+5.5", or a numeric offset such as "-3".',
            "INVALID_TIMEZONE",
        )


class NoSettingsProvidedError(SettingsError):
    """Raised when a batch update carries no settings."""

    def __init__(self):
        super().__init__("No settings provided.", "NO_SETTINGS_PROVIDED", 400)


class UpdateFailedError(SettingsError):
    """Raised when a write did not take effect."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(
            f'Failed to update setting "{setting}".', "UPDATE_FAILED", 500
        )


class LanguagePackUnavailableError(SettingsError):
    """Raised when a locale cannot be installed automatically."""

    def __init__(self, locale: str):
        self.locale = locale
        super().__init__(
            f'Language "{locale}" could not be installed automatically. '
            "Please install the language pack manually via "
            "Settings > General > Site Language in the classic admin.",
            "LANGUAGE_PACK_UNAVAILABLE",
            400,
        )


class BatchUpdateFailedError(SettingsError):
    """Raised when every entry of a batch update failed."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__(
            "Failed to update any settings.", "SETTINGS_UPDATE_FAILED", 400
        )


class OptionStoreError(SettingsError):
    """Raised when the option store cannot be read or written."""

    def __init__(self, message: str):
        super().__init__(message, "OPTION_STORE_ERROR", 500)
