from .translation_record import TranslationRecord

__all__ = [
    "TranslationRecord",
]
