"""
Locale helpers

Pure functions for BCP 47 locale handling used by the automatic
translation declarations:
- normalising locale options into ordered, de-duplicated tuples
- base language extraction for translator APIs
- attribute-name fragments for per-locale toggles
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

# ── Public helpers ────────────────────────────────────────────────────────────


def normalize_locales(locales: Any) -> tuple[str, ...]:
    """Flatten a locale option into an ordered tuple of locale strings.

    Accepts a single locale, a (possibly nested) list/tuple of locales, or
    None. ``None`` entries and blank strings are dropped, duplicates keep
    their first position so declaration order stays the priority order.

    Args:
        locales: "en", ["en", "fr"], ("en", ["fr", None]) ...

    Returns:
        Tuple of locale strings, e.g. ("en", "fr").
    """
    normalized: list[str] = []
    for locale in _flatten(locales):
        code = str(locale).strip()
        if code and code not in normalized:
            normalized.append(code)
    return tuple(normalized)


def base_language(locale: str) -> str:
    """Return the lower-cased base language of a locale ("fr-CA" → "fr")."""
    return locale.replace("_", "-").split("-")[0].lower()


def locale_attribute_fragment(locale: str) -> str:
    """Return the identifier-safe form of a locale ("fr-CA" → "fr_ca")."""
    return locale.replace("-", "_").lower()


# ── Internal ──────────────────────────────────────────────────────────────────


def _flatten(value: Any) -> Iterable[Any]:
    if value is None:
        return
    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            yield from _flatten(item)
    else:
        yield value
