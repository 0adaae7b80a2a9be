"""
Translator adapters

The engine calls whichever adapter ``get_translator()`` returns. It is
built from settings on first use and can be replaced with
``set_translator()`` (tests, custom backends).
"""

from __future__ import annotations

from autotranslate.config import Settings, settings
from autotranslate.exceptions import ConfigurationError

from .base import TranslatorAdapter, check_result_count
from .http import HttpTranslator

_translator: TranslatorAdapter | None = None


def build_translator(config: Settings) -> TranslatorAdapter:
    if config.translator_backend == "http":
        return HttpTranslator(
            base_url=config.translator_url,
            api_key=config.translator_api_key,
            timeout_seconds=config.translator_timeout_seconds,
        )
    raise ConfigurationError(f"Unknown translator backend: {config.translator_backend}", option="translator_backend")


def get_translator() -> TranslatorAdapter:
    global _translator
    if _translator is None:
        _translator = build_translator(settings)
    return _translator


def set_translator(translator: TranslatorAdapter | None) -> None:
    global _translator
    _translator = translator


__all__ = [
    "HttpTranslator",
    "TranslatorAdapter",
    "build_translator",
    "check_result_count",
    "get_translator",
    "set_translator",
]
