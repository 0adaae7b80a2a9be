"""
TranslationDispatcher

Runs cascade requests once the triggering transaction has committed,
either inline or through the background job queue, and writes the
translated text into the target record.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING

from autotranslate.config import settings
from autotranslate.exceptions import DatabaseError, TranslatorError
from autotranslate.scheduler import job_queue as default_job_queue
from autotranslate.translators.base import check_result_count

if TYPE_CHECKING:
    from autotranslate.automatic.state import TranslationStateCache
    from autotranslate.automatic.store import CommitHooks, LocalizedRecordStore
    from autotranslate.models.translation_record import TranslationRecord
    from autotranslate.scheduler import JobQueue
    from autotranslate.translators.base import TranslatorAdapter

logger = logging.getLogger(__name__)


class TranslationDispatcher:
    """
    Executes translation requests for one host instance.

    Args:
        cache:          The host's TranslationStateCache (source texts).
        store:          Storage used to persist translated records.
        hooks:          Commit hooks deferring work until after commit.
        translator:     Adapter performing the external translation call.
        locate:         Returns the host's ``(host_type, host_id)`` key.
        job_queue:      Queue used in asynchronous mode.
        asynchronously: Overrides ``settings.automatic_translation_asynchronously``
                        when not None.
    """

    def __init__(
        self,
        cache: TranslationStateCache,
        store: LocalizedRecordStore,
        hooks: CommitHooks,
        translator: TranslatorAdapter,
        locate: Callable[[], tuple[str, int]],
        job_queue: JobQueue | None = None,
        asynchronously: bool | None = None,
    ) -> None:
        self.cache = cache
        self.store = store
        self.hooks = hooks
        self.translator = translator
        self.locate = locate
        self.job_queue = job_queue
        self.asynchronously = asynchronously

    @property
    def runs_asynchronously(self) -> bool:
        if self.asynchronously is not None:
            return self.asynchronously
        return settings.automatic_translation_asynchronously

    def dispatch(self, field: str, from_locale: str, to_locale: str) -> None:
        """Schedule one translation to run after the enclosing transaction commits."""
        if self.runs_asynchronously:
            self.hooks.after_commit(partial(self._enqueue, field, from_locale, to_locale))
        else:
            self.hooks.after_commit(partial(self.translate_into, field, from_locale, to_locale))

    def _enqueue(self, field: str, from_locale: str, to_locale: str) -> None:
        queue = self.job_queue or default_job_queue
        host_type, host_id = self.locate()
        queue.enqueue(host_type, host_id, field, from_locale, to_locale)

    def translate_into(self, field: str, from_locale: str, to_locale: str) -> bool:
        """Resolve (or create) the target record and run ``perform`` on it."""
        return self.perform(self.cache.get(to_locale), field, from_locale, to_locale)

    def perform(self, record: TranslationRecord, field: str, from_locale: str, to_locale: str) -> bool:
        """
        Translate ``field`` from ``from_locale`` into ``record`` and persist it.

        Failures are contained to this request: they are logged, the
        record keeps its previous value and flag, and False is returned.
        A target pinned in the meantime is left alone.
        """
        if not record.is_automatic(field):
            logger.debug("Skipping pinned target %s %s", field, to_locale)
            return False

        source_text = self.cache.read(field, from_locale)
        try:
            translated = self.translate_text(source_text, from_locale, to_locale)
        except TranslatorError as exc:
            logger.warning(
                "Automatic translation of %s %s->%s failed: %s",
                field,
                from_locale,
                to_locale,
                exc.message,
                extra={"field": field, "from_locale": from_locale, "to_locale": to_locale},
            )
            return False
        except Exception:
            # Custom adapters may raise anything (timeouts, bad payloads)
            logger.exception(
                "Automatic translation of %s %s->%s raised",
                field,
                from_locale,
                to_locale,
                extra={"field": field, "from_locale": from_locale, "to_locale": to_locale},
            )
            return False

        if not record.write(field, translated):
            logger.debug("Translation of %s %s->%s unchanged", field, from_locale, to_locale)
            return True

        try:
            self.store.save(record)
        except DatabaseError as exc:
            if field in record.changed_fields:
                record.changed_fields.remove(field)
            logger.warning("Storing translation of %s into %s failed: %s", field, to_locale, exc.message)
            return False

        logger.info(
            "Automatically translated %s %s->%s",
            field,
            from_locale,
            to_locale,
            extra={"field": field, "from_locale": from_locale, "to_locale": to_locale},
        )
        return True

    def translate_text(self, text: str | None, from_locale: str, to_locale: str) -> str | None:
        # A blank source blanks the target without calling the translator
        if not (text or "").strip():
            return text
        results = self.translator.translate([text], from_locale, to_locale)
        if not isinstance(results, list) or not all(isinstance(result, str) for result in results):
            name = getattr(self.translator, "name", None)
            raise TranslatorError(f"Translator returned a malformed result: {results!r}", translator=name)
        check_result_count([text], results)
        return results[0]
