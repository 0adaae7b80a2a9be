from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from autotranslate.automatic.cascade import TranslationRequest
from autotranslate.exceptions import InvalidOperationError, UnknownTranslatedFieldError

if TYPE_CHECKING:
    from autotranslate.automatic.cascade import CascadeResolver
    from autotranslate.automatic.dispatcher import TranslationDispatcher
    from autotranslate.automatic.policy import FieldLocalePolicy
    from autotranslate.automatic.source import SourceLocaleSelector
    from autotranslate.automatic.state import TranslationStateCache

logger = logging.getLogger(__name__)


class TranslationOrchestrator:
    """Turns committed source edits of one host into dispatched translations."""

    def __init__(
        self,
        policy: FieldLocalePolicy,
        cache: TranslationStateCache,
        resolver: CascadeResolver,
        selector: SourceLocaleSelector,
        dispatcher: TranslationDispatcher,
    ) -> None:
        self.policy = policy
        self.cache = cache
        self.resolver = resolver
        self.selector = selector
        self.dispatcher = dispatcher

    def on_host_record_committed(self, from_locale: str, changed_field_names: Iterable[str]) -> list[TranslationRequest]:
        """
        Cascade the fields changed in ``from_locale`` into their target locales.

        All requests are resolved before any is dispatched. Targets whose
        flag is pinned are dropped silently. Returns the dispatched
        requests; translation itself happens after commit.
        """
        requests = self.resolver.resolve(from_locale, list(changed_field_names))
        dispatched: list[TranslationRequest] = []
        for request in requests:
            if not self.cache.flag(request.field, request.to_locale):
                logger.debug("Target %s %s is pinned, not cascading", request.field, request.to_locale)
                continue
            self.dispatcher.dispatch(request.field, request.from_locale, request.to_locale)
            dispatched.append(request)
        if dispatched:
            logger.info("Cascading %d translations from %s", len(dispatched), from_locale)
        return dispatched

    def retranslate(self, field: str, to_locale: str, from_locale: str | None = None) -> TranslationRequest:
        """Schedule a translation of one target, choosing the source locale when not given."""
        if not self.policy.is_target(field, to_locale):
            raise UnknownTranslatedFieldError(field, to_locale)
        if from_locale is None:
            from_locale = self.selector.select(field)
        elif not self.policy.is_source(field, from_locale):
            raise UnknownTranslatedFieldError(field, from_locale)
        if from_locale == to_locale:
            raise InvalidOperationError(
                f"Cannot translate {field} from {from_locale} into itself",
                details={"field": field, "locale": to_locale},
            )
        self.dispatcher.dispatch(field, from_locale, to_locale)
        return TranslationRequest(from_locale=from_locale, field=field, to_locale=to_locale)
