"""Business logic services for Helix."""

from helix.services.handlers import LanguageHandler, OptionHandler, TimezoneHandler
from helix.services.host import HostService, HostSnapshot
from helix.services.options import OptionStore
from helix.services.settings import SettingsService, UpdateResult
from helix.services.translations import TranslationService

__all__ = [
    "HostService",
    "HostSnapshot",
    "LanguageHandler",
    "OptionHandler",
    "OptionStore",
    "SettingsService",
    "TimezoneHandler",
    "TranslationService",
    "UpdateResult",
]
