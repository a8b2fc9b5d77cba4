"""Site option model: the flat key/value namespace settings are stored in."""

from __future__ import annotations

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from helix.db.base import Base, UpdatedAtMixin


class Option(UpdatedAtMixin, Base):
    """Stores one site option as a name/value pair.

    Values are stored as JSON-encoded text so strings, numbers and
    booleans round-trip with their type.
    """

    __tablename__ = "options"

    # Primary key - the option name (e.g. "blogname", "WPLANG")
    option_name: Mapped[str] = mapped_column(String(191), primary_key=True)

    # JSON-encoded value
    option_value: Mapped[str] = mapped_column(Text, nullable=False)

    autoload: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Option {self.option_name}>"
