"""
Key-Value Model.

One row per storage key. Values are opaque text: JSON for the note
collection and boolean preferences, a plain string for userSetTheme.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notorica.models.base import Base, TimestampMixin


class KeyValueEntry(TimestampMixin, Base):
    """Durable key-value pair."""

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )
    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key={self.key!r})>"
