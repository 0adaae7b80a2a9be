from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from autotranslate.exceptions import TranslationCountMismatchError


class TranslatorAdapter(Protocol):
    name: str

    def translate(self, texts: list[str], source_locale: str, target_locale: str) -> list[str]:
        ...


def check_result_count(texts: Sequence[str], results: Sequence[str]) -> None:
    """Translators must return exactly one result per input text, in order."""
    if len(results) != len(texts):
        raise TranslationCountMismatchError(expected=len(texts), received=len(results))
