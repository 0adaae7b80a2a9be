from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autotranslate.automatic.policy import FieldLocalePolicy
    from autotranslate.automatic.state import TranslationStateCache


class SourceLocaleSelector:
    """Picks the locale a field should be translated from when none is given."""

    def __init__(self, policy: FieldLocalePolicy, cache: TranslationStateCache) -> None:
        self.policy = policy
        self.cache = cache

    def select(self, field: str) -> str | None:
        """
        Return the highest-priority source locale holding an authored value.

        Source locales whose value is itself automatic are skipped, as are
        blank values. When no source qualifies the first declared source is
        returned and callers must tolerate an empty text. Returns None when
        ``field`` has no source locales.
        """
        locales = self.policy.source_locales_for(field)
        if not locales:
            return None
        for locale in locales:
            if self.cache.flag(field, locale):
                continue
            if (self.cache.read(field, locale) or "").strip():
                return locale
        return locales[0]
