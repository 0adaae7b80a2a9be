"""
Cascade resolution

CascadeResolver decides which (field, target locale) pairs must be
re-translated after fields changed in one locale. It only reads state; the
orchestrator acts on the result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autotranslate.automatic.policy import FieldLocalePolicy
    from autotranslate.automatic.state import TranslationStateCache


@dataclass(frozen=True)
class TranslationRequest:
    """One unit of cascade work: translate ``field`` from one locale into another."""

    from_locale: str
    field: str
    to_locale: str


class CascadeResolver:
    def __init__(self, policy: FieldLocalePolicy, cache: TranslationStateCache) -> None:
        self.policy = policy
        self.cache = cache

    def resolve(self, from_locale: str, changed_fields: Iterable[str]) -> list[TranslationRequest]:
        """
        Return the translation requests triggered by ``changed_fields`` in ``from_locale``.

        A field cascades only when ``from_locale`` is one of its sources and
        its value there is not automatic itself; an automatic value is the
        product of an earlier cascade and never feeds another one. Requests
        follow the caller's field order, then the declared target order.
        """
        requests: list[TranslationRequest] = []
        seen: set[str] = set()
        for field in changed_fields:
            if field in seen:
                continue
            seen.add(field)
            if not self.policy.is_source(field, from_locale):
                continue
            if self.cache.flag(field, from_locale):
                continue
            for to_locale in self.policy.target_locales_for(field):
                if to_locale == from_locale:
                    continue
                requests.append(TranslationRequest(from_locale=from_locale, field=field, to_locale=to_locale))
        return requests
