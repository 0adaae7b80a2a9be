"""
Storage collaborators of the automatic translation engine

LocalizedRecordStore: reads and writes the per-locale TranslationRecord
rows of a host record.
CommitHooks: lets the engine run work only after the enclosing
transaction has committed.

SqlAlchemyRecordStore and SessionCommitHooks implement both on top of a
TranslatingSession.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session  # noqa: TC002

from autotranslate.database import TranslatingSession
from autotranslate.exceptions import DatabaseError, InvalidOperationError
from autotranslate.models.translation_record import TranslationRecord

logger = logging.getLogger(__name__)


class LocalizedRecordStore(Protocol):
    def find(self, host_type: str, host_id: int, locale: str) -> TranslationRecord | None:
        ...

    def build(self, host_type: str, host_id: int, locale: str, automatic_flags: dict[str, bool]) -> TranslationRecord:
        ...

    def save(self, record: TranslationRecord) -> None:
        ...

    def expire(self, record: TranslationRecord) -> None:
        ...


class CommitHooks(Protocol):
    def after_commit(self, callback: Callable[[], None]) -> None:
        ...


class SqlAlchemyRecordStore:
    """LocalizedRecordStore backed by the ``automatic_translations`` table."""

    def __init__(self, session: Session):
        self.session = session

    def find(self, host_type: str, host_id: int, locale: str) -> TranslationRecord | None:
        result = self.session.execute(
            select(TranslationRecord).where(
                TranslationRecord.host_type == host_type,
                TranslationRecord.host_id == host_id,
                TranslationRecord.locale == locale,
            )
        )
        return result.scalars().first()

    def build(self, host_type: str, host_id: int, locale: str, automatic_flags: dict[str, bool]) -> TranslationRecord:
        """Create a record and add it to the session; it is inserted on the next flush."""
        record = TranslationRecord(
            host_type=host_type,
            host_id=host_id,
            locale=locale,
            automatic_flags=dict(automatic_flags),
        )
        self.session.add(record)
        return record

    def save(self, record: TranslationRecord) -> None:
        """Persist ``record`` in its own transaction.

        Raises:
            DatabaseError: if the commit fails; the session is rolled back.
        """
        self.session.add(record)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Saving %r failed: %s", record, exc)
            raise DatabaseError(f"Could not save translation record: {exc}", operation="save") from exc

    def expire(self, record: TranslationRecord) -> None:
        """Force ``record`` to be re-read; unsaved records are discarded."""
        state = inspect(record)
        if state.session is not self.session:
            return
        if state.pending:
            self.session.expunge(record)
        elif state.persistent:
            self.session.expire(record)


class SessionCommitHooks:
    """CommitHooks that queue callbacks on a TranslatingSession."""

    def __init__(self, session: Session):
        if not isinstance(session, TranslatingSession):
            raise InvalidOperationError(
                "Automatic translation requires a TranslatingSession to run work after commit",
                details={"session_class": type(session).__name__},
            )
        self.session = session

    def after_commit(self, callback: Callable[[], None]) -> None:
        self.session.after_commit(callback)
