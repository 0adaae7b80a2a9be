"""
i18n (Internationalization) package

Provides locale normalisation and naming helpers for the automatic
translation declarations.
"""

from .locale import (
    base_language,
    locale_attribute_fragment,
    normalize_locales,
)

__all__ = [
    "base_language",
    "locale_attribute_fragment",
    "normalize_locales",
]
