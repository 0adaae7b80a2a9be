"""
TranslationStateCache

Per-host-instance cache of one TranslationRecord per locale. Lookups are
get-or-create-with-defaults: the first ``get(locale)`` loads the stored
row (or builds one with the policy's default flags), later lookups return
the same object so flag toggles and edits accumulate until persisted.

Reads (``flag``, ``read``) only look records up. A locale without a row
answers with its default flag and no value, and nothing is added to the
session, so a background job can create the row without a conflicting
insert from the request that queued it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from autotranslate.exceptions import UnknownTranslatedFieldError

if TYPE_CHECKING:
    from autotranslate.automatic.policy import FieldLocalePolicy
    from autotranslate.automatic.store import LocalizedRecordStore
    from autotranslate.models.translation_record import TranslationRecord

logger = logging.getLogger(__name__)


class TranslationStateCache:
    """
    Locale → TranslationRecord cache owned by one host instance.

    Args:
        policy: The host type's FieldLocalePolicy.
        store:  Storage the records are read from and added to.
        locate: Returns the host's ``(host_type, host_id)`` key; called
                lazily so a new host can be flushed first.
        host:   Host instance, attached to every resolved record.
    """

    def __init__(
        self,
        policy: FieldLocalePolicy,
        store: LocalizedRecordStore,
        locate: Callable[[], tuple[str, int]],
        host: Any = None,
    ) -> None:
        self.policy = policy
        self.store = store
        self.locate = locate
        self.host = host
        self._records: dict[str, TranslationRecord] = {}
        # Flag values staged without a record (host duplication): locale → field → flag
        self._staged_flags: dict[str, dict[str, bool]] = {}

    # ── Records ───────────────────────────────────────────────────────────────

    def get(self, locale: str) -> TranslationRecord:
        record = self.lookup(locale)
        if record is not None:
            return record

        host_type, host_id = self.locate()
        defaults = self.policy.default_flags(locale)
        record = self.store.build(host_type, host_id, locale, defaults)
        logger.debug("Built translation record %s:%s %s flags=%s", host_type, host_id, locale, defaults)
        return self._adopt(locale, record)

    def lookup(self, locale: str) -> TranslationRecord | None:
        """Return the cached or stored record of ``locale`` without building one."""
        record = self._records.get(locale)
        if record is not None:
            return record

        host_type, host_id = self.locate()
        record = self.store.find(host_type, host_id, locale)
        if record is None:
            return None
        # Fields configured after the row was written get their defaults
        for name, automatic in self.policy.default_flags(locale).items():
            if name not in record.automatic_flags:
                record.set_automatic(name, automatic)
        return self._adopt(locale, record)

    def _adopt(self, locale: str, record: TranslationRecord) -> TranslationRecord:
        for name, automatic in self._staged_flags.pop(locale, {}).items():
            record.set_automatic(name, automatic)
        record.host = self.host
        self._records[locale] = record
        return record

    def records(self) -> list[TranslationRecord]:
        return list(self._records.values())

    def invalidate(self) -> None:
        """Drop every cached record and force it to be re-read from storage."""
        for record in self._records.values():
            self.store.expire(record)
        self._records.clear()
        self._staged_flags.clear()

    # ── Automatic flags ───────────────────────────────────────────────────────

    def flag(self, field: str, locale: str) -> bool:
        """Resolved flag of ``field`` in ``locale``; reading never creates a record."""
        self._check(field, locale)
        staged = self._staged_flags.get(locale, {})
        if locale not in self._records and field in staged:
            return staged[field]
        record = self.lookup(locale)
        if record is None:
            return self.policy.default_flags(locale).get(field, False)
        return record.is_automatic(field)

    def set_flag(self, field: str, locale: str, automatic: bool) -> None:
        self._check(field, locale)
        self.get(locale).set_automatic(field, automatic)

    def stage_flag(self, field: str, locale: str, automatic: bool) -> None:
        """Hold a flag value in memory; applied when ``locale`` is first resolved."""
        self._check(field, locale)
        record = self._records.get(locale)
        if record is not None:
            record.set_automatic(field, automatic)
        else:
            self._staged_flags.setdefault(locale, {})[field] = bool(automatic)

    def copy_flags_into(self, other: TranslationStateCache, fields: Iterable[str]) -> None:
        """Copy the resolved flag values of ``fields`` onto ``other`` without creating records there."""
        for name in fields:
            for locale in self.policy.locales_for(name):
                other.stage_flag(name, locale, self.flag(name, locale))

    # ── Field values ──────────────────────────────────────────────────────────

    def read(self, field: str, locale: str) -> str | None:
        self._check(field)
        record = self.lookup(locale)
        return record.read(field) if record is not None else None

    def write(self, field: str, locale: str, text: str | None) -> bool:
        self._check(field)
        return self.get(locale).write(field, text)

    def _check(self, field: str, locale: str | None = None) -> None:
        if locale is None:
            if field not in self.policy.source_locales:
                raise UnknownTranslatedFieldError(field)
        elif not self.policy.is_configured(field, locale):
            raise UnknownTranslatedFieldError(field, locale)
