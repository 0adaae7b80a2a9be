from autotranslate.automatic import (
    AutomaticTranslationMixin,
    FieldLocalePolicy,
    TranslationRequest,
    automatic_translation,
)

__all__ = [
    "AutomaticTranslationMixin",
    "FieldLocalePolicy",
    "TranslationRequest",
    "automatic_translation",
]
