"""
TranslationRecord model

Stores the per-locale state of a translated host record using a single
generic table: one row per (host_type, host_id, locale) holding the
locale's field values and its automatic flags.

automatic_flags[field] is True when the locale's value is maintained by
cascading translation and may be overwritten, False when it was authored
by hand and is pinned.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import reconstructor

from autotranslate.database import Base


class TranslationRecord(Base):
    """Per-locale field values and automatic flags of one host record.

    ``changed_fields`` and ``host`` are transient: the former lists fields
    written since the last flush, the latter points back at the host
    instance that loaded the record through its state cache.
    """

    __tablename__ = "automatic_translations"

    id = Column(Integer, primary_key=True, index=True)
    host_type = Column(String(100), nullable=False)
    host_id = Column(Integer, nullable=False)
    locale = Column(String(10), nullable=False)  # BCP 47 e.g. "en", "fr-CA"

    fields = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    automatic_flags = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)

    created_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        # One row per (host, locale) pair
        UniqueConstraint("host_type", "host_id", "locale", name="uq_automatic_translation_locale"),
        Index("idx_at_host", "host_type", "host_id"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("fields", {})
        kwargs.setdefault("automatic_flags", {})
        super().__init__(**kwargs)
        self._init_transient()

    @reconstructor
    def _init_transient(self) -> None:
        self.changed_fields: list[str] = []
        self.host = None

    def read(self, field: str) -> str | None:
        return self.fields.get(field)

    def write(self, field: str, text: str | None) -> bool:
        """Set the locale's value for ``field``.

        Returns False (and records nothing) when the value is unchanged, so
        re-applying the same text is a no-op.
        """
        if self.fields.get(field) == text:
            return False
        self.fields[field] = text
        if field not in self.changed_fields:
            self.changed_fields.append(field)
        return True

    def is_automatic(self, field: str) -> bool:
        return bool(self.automatic_flags.get(field))

    def set_automatic(self, field: str, automatic: bool) -> None:
        automatic = bool(automatic)
        if self.automatic_flags.get(field) is not automatic:
            self.automatic_flags[field] = automatic

    def __repr__(self) -> str:
        return f"<TranslationRecord {self.host_type}:{self.host_id} {self.locale}>"
