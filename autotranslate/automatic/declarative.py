"""
Declaring automatically translated models

    @automatic_translation(["title", "body"], {"from": ["en"], "to": ["en", "fr", "de"]})
    class Article(AutomaticTranslationMixin, Base):
        __tablename__ = "articles"
        id = Column(Integer, primary_key=True)

The decorator validates the options, composes them into the class's
FieldLocalePolicy and registers the model. Decorators may be stacked for
independent field groups; the last declaration of a field wins.

Each instance gets an AutomaticTranslation facade bound to its session.
Edits written through it are picked up at flush time and cascaded once
the session commits.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import partial
from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session, object_session

from autotranslate.automatic.cascade import CascadeResolver, TranslationRequest
from autotranslate.automatic.dispatcher import TranslationDispatcher
from autotranslate.automatic.orchestrator import TranslationOrchestrator
from autotranslate.automatic.policy import FieldLocalePolicy, normalize_fields, parse_options
from autotranslate.automatic.registry import host_registry, host_type_of
from autotranslate.automatic.source import SourceLocaleSelector
from autotranslate.automatic.state import TranslationStateCache
from autotranslate.automatic.store import SessionCommitHooks, SqlAlchemyRecordStore
from autotranslate.database import TranslatingSession
from autotranslate.exceptions import ConfigurationError, InvalidOperationError, UnknownTranslatedFieldError
from autotranslate.i18n.locale import locale_attribute_fragment
from autotranslate.models.translation_record import TranslationRecord
from autotranslate.translators import get_translator

logger = logging.getLogger(__name__)


def automatic_attribute_name(field: str, locale: str) -> str:
    """Name of the per-(field, locale) toggle, e.g. ``title_fr_ca_automatic``."""
    return f"{field}_{locale_attribute_fragment(locale)}_automatic"


def automatic_translation(fields: str | Iterable[str], options: Any):
    """Class decorator enabling automatic translation of ``fields``.

    Args:
        fields:  Field name or names.
        options: ``{"from": locales, "to": locales}``, or bare source
                 locale(s) to target every supported language.

    Raises:
        ConfigurationError: on missing ``from``/``to`` locales, or when the
        class does not mix in AutomaticTranslationMixin. The class is left
        unchanged in both cases.
    """
    from_locales, to_locales = parse_options(options)
    field_names = normalize_fields(fields)

    def decorator(cls):
        if not issubclass(cls, AutomaticTranslationMixin):
            raise ConfigurationError(f"{cls.__name__} must mix in AutomaticTranslationMixin")
        cls.__automatic_translation__ = cls.__automatic_translation__.configure(field_names, from_locales, to_locales)
        host_registry.register(cls)
        return cls

    return decorator


class AutomaticTranslation:
    """
    The automatic translation engine wired for one host instance.

    Built lazily by ``AutomaticTranslationMixin.automatic_translation`` and
    rebuilt whenever the host moves to another session.
    """

    def __init__(
        self,
        host: Any,
        session: Session,
        *,
        translator=None,
        job_queue=None,
        asynchronously: bool | None = None,
    ) -> None:
        self.host = host
        self.session = session
        self.policy: FieldLocalePolicy = type(host).__automatic_translation__
        self.store = SqlAlchemyRecordStore(session)
        self.cache = TranslationStateCache(self.policy, self.store, self.locate, host=host)
        self.selector = SourceLocaleSelector(self.policy, self.cache)
        self.resolver = CascadeResolver(self.policy, self.cache)
        self.dispatcher = TranslationDispatcher(
            self.cache,
            self.store,
            SessionCommitHooks(session),
            translator or get_translator(),
            self.locate,
            job_queue=job_queue,
            asynchronously=asynchronously,
        )
        self.orchestrator = TranslationOrchestrator(
            self.policy, self.cache, self.resolver, self.selector, self.dispatcher
        )

    def locate(self) -> tuple[str, int]:
        if self.host.id is None:
            # New hosts need an id before their translation rows can reference it
            self.session.flush()
        return host_type_of(type(self.host)), self.host.id

    def on_host_record_committed(self, from_locale: str, changed_field_names: Iterable[str]) -> list[TranslationRequest]:
        return self.orchestrator.on_host_record_committed(from_locale, changed_field_names)


class AutomaticTranslationMixin:
    """Mixin for SQLAlchemy models whose fields are translated automatically."""

    __automatic_translation__: FieldLocalePolicy = FieldLocalePolicy()

    @property
    def automatic_translation(self) -> AutomaticTranslation:
        session = object_session(self)
        if session is None:
            raise InvalidOperationError(
                f"{type(self).__name__} must be added to a session before using automatic translation"
            )
        facade = getattr(self, "_automatic_translation", None)
        if facade is None or facade.session is not session:
            facade = AutomaticTranslation(self, session)
            self._automatic_translation = facade
        return facade

    # ── Field values ──────────────────────────────────────────────────────────

    def read_translation(self, field: str, locale: str) -> str | None:
        return self.automatic_translation.cache.read(field, locale)

    def write_translation(self, field: str, locale: str, text: str | None) -> bool:
        return self.automatic_translation.cache.write(field, locale, text)

    # ── Automatic flags ───────────────────────────────────────────────────────

    def is_automatic(self, field: str, locale: str) -> bool:
        return self.automatic_translation.cache.flag(field, locale)

    def set_automatic(self, field: str, locale: str, automatic: bool) -> None:
        self.automatic_translation.cache.set_flag(field, locale, automatic)

    @classmethod
    def automatic_attribute_names(cls) -> dict[str, tuple[str, str]]:
        """Toggle name → (field, locale) for every configured pair."""
        policy = cls.__automatic_translation__
        return {
            automatic_attribute_name(field, locale): (field, locale)
            for field in policy.fields
            for locale in policy.locales_for(field)
        }

    def automatic_flags(self) -> dict[str, bool]:
        cache = self.automatic_translation.cache
        return {name: cache.flag(field, locale) for name, (field, locale) in self.automatic_attribute_names().items()}

    def assign_automatic_flags(self, flags: Mapping[str, bool]) -> None:
        """Apply ``{"title_fr_automatic": False, ...}``; unknown names raise before anything changes."""
        names = self.automatic_attribute_names()
        unknown = [name for name in flags if name not in names]
        if unknown:
            raise UnknownTranslatedFieldError(unknown[0])
        for name, automatic in flags.items():
            field, locale = names[name]
            self.set_automatic(field, locale, automatic)

    # ── Cascade entry points ──────────────────────────────────────────────────

    def automatic_translation_locale(self, field: str) -> str | None:
        return self.automatic_translation.selector.select(field)

    def retranslate(self, field: str, to_locale: str, from_locale: str | None = None) -> TranslationRequest:
        return self.automatic_translation.orchestrator.retranslate(field, to_locale, from_locale)

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def reload_translations(self) -> None:
        """Refresh the host from the database and drop its cached translation state."""
        self.automatic_translation.session.refresh(self)

    def copy_automatic_flags_to(self, other: AutomaticTranslationMixin) -> None:
        """Give a duplicate of this host the same automatic flags, in memory only."""
        policy = type(self).__automatic_translation__
        self.automatic_translation.cache.copy_flags_into(other.automatic_translation.cache, policy.fields)


# ── Change detection ──────────────────────────────────────────────────────────


@event.listens_for(TranslatingSession, "after_flush")
def _collect_translation_changes(session: Session, flush_context) -> None:
    """Queue a cascade for every translation record written since the last flush."""
    for obj in list(session.new) + list(session.dirty):
        if not isinstance(obj, TranslationRecord) or not obj.changed_fields:
            continue
        changed = list(obj.changed_fields)
        obj.changed_fields.clear()
        session.after_commit(partial(_cascade_committed_change, session, obj, obj.locale, changed))


def _cascade_committed_change(session: Session, record: TranslationRecord, locale: str, fields: list[str]) -> None:
    host = record.host
    if host is None or object_session(host) is not session:
        host = host_registry.load(session, record.host_type, record.host_id)
    if host is None:
        logger.warning("Translation record %r has no host, skipping cascade", record)
        return
    host.automatic_translation.on_host_record_committed(locale, fields)


@event.listens_for(AutomaticTranslationMixin, "refresh", propagate=True)
def _invalidate_on_refresh(target, context, attrs) -> None:
    """Drop cached translation state when the whole host is refreshed.

    Loads of expired attributes (``attrs`` is the set of loaded keys) keep
    the cache, so flag changes made after a commit survive until saved.
    """
    if attrs is not None:
        return
    facade = target.__dict__.get("_automatic_translation")
    if facade is not None:
        facade.cache.invalidate()
