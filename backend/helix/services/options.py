"""Option store: read/write access to the site's flat options table."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from helix.core.logging import get_logger
from helix.db.models import Option
from helix.settings.exceptions import OptionStoreError

logger = get_logger(__name__)

_MISSING = object()


class OptionStore:
    """Service for reading and writing site options.

    Values are JSON-encoded in the ``options`` table. Writes are flushed to
    the session but not committed; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession):
        """Initialize the option store.

        Args:
            db: AsyncSession for database operations.
        """
        self.db = db

    async def get(self, name: str, default: Any = None) -> Any:
        """Get an option value.

        Args:
            name: The option name.
            default: Value returned when the option has never been written.

        Returns:
            The decoded option value or ``default``.
        """
        row = await self._get_row(name)
        if row is None:
            return default
        value = self._decode(row)
        return default if value is _MISSING else value

    async def get_many(self, names: Iterable[str]) -> dict[str, Any]:
        """Get several options in one query.

        Returns:
            Mapping of option name to decoded value for options that exist.
        """
        names = list(dict.fromkeys(names))
        if not names:
            return {}

        try:
            result = await self.db.execute(
                select(Option).where(Option.option_name.in_(names))
            )
        except SQLAlchemyError as e:
            logger.error("option_read_failed", names=names, error=str(e))
            raise OptionStoreError(f"Failed to read options: {e}") from e

        values: dict[str, Any] = {}
        for row in result.scalars().all():
            value = self._decode(row)
            if value is not _MISSING:
                values[row.option_name] = value
        return values

    async def update(self, name: str, value: Any, autoload: bool = True) -> bool:
        """Create or update an option.

        Args:
            name: The option name.
            value: The new value (must be JSON-serializable).
            autoload: Whether the option is loaded on every request.

        Returns:
            True if the option was written, False if it already held ``value``.

        Raises:
            OptionStoreError: If the database write fails.
        """
        row = await self._get_row(name)

        if row is not None:
            current = self._decode(row)
            if current is not _MISSING and _same_value(current, value):
                return False

        encoded = json.dumps(value)
        try:
            if row is not None:
                row.option_value = encoded
            else:
                row = Option(option_name=name, option_value=encoded, autoload=autoload)
                self.db.add(row)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("option_write_failed", name=name, error=str(e))
            raise OptionStoreError(f"Failed to write option {name}: {e}") from e

        logger.debug("option_updated", name=name, value_type=type(value).__name__)
        return True

    async def delete(self, name: str) -> bool:
        """Delete an option.

        Returns:
            True if the option was deleted, False if it did not exist.
        """
        row = await self._get_row(name)
        if row is None:
            return False

        try:
            await self.db.delete(row)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("option_delete_failed", name=name, error=str(e))
            raise OptionStoreError(f"Failed to delete option {name}: {e}") from e

        logger.debug("option_deleted", name=name)
        return True

    # Private methods

    async def _get_row(self, name: str) -> Option | None:
        try:
            result = await self.db.execute(
                select(Option).where(Option.option_name == name)
            )
        except SQLAlchemyError as e:
            logger.error("option_read_failed", name=name, error=str(e))
            raise OptionStoreError(f"Failed to read option {name}: {e}") from e
        return result.scalar_one_or_none()

    @staticmethod
    def _decode(row: Option) -> Any:
        try:
            return json.loads(row.option_value)
        except json.JSONDecodeError:
            logger.warning("invalid_option_json", name=row.option_name)
            return _MISSING


def _same_value(current: Any, new: Any) -> bool:
    """Compare stored and new values without treating True as 1."""
    if isinstance(current, bool) or isinstance(new, bool):
        return type(current) is type(new) and current == new
    return current == new
