"""
HTTP translator

Calls a LibreTranslate-compatible endpoint:

    POST {base_url}/translate
    {"q": [...], "source": "en", "target": "fr", "format": "text", "api_key": "..."}
    → {"translatedText": [...]}

Transport failures, non-2xx responses and malformed payloads are raised as
TranslatorError so callers can isolate them per request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from autotranslate.exceptions import TranslatorError
from autotranslate.i18n.locale import base_language
from autotranslate.translators.base import check_result_count

logger = logging.getLogger(__name__)


@dataclass
class HttpTranslator:
    base_url: str
    api_key: str | None = None
    timeout_seconds: float = 30.0
    transport: httpx.BaseTransport | None = None

    name: str = "http"

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self.transport,
        )

    def translate(self, texts: list[str], source_locale: str, target_locale: str) -> list[str]:
        if not texts:
            return []

        payload = {
            "q": list(texts),
            "source": base_language(source_locale),
            "target": base_language(target_locale),
            "format": "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        try:
            with self._client() as client:
                response = client.post("/translate", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise TranslatorError(
                f"Translator responded {exc.response.status_code} for {source_locale}->{target_locale}",
                translator=self.name,
            ) from exc
        except httpx.HTTPError as exc:
            raise TranslatorError(f"Translator request failed: {exc}", translator=self.name) from exc
        except ValueError as exc:
            raise TranslatorError("Translator returned invalid JSON", translator=self.name) from exc

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if isinstance(translated, str):
            translated = [translated]
        if not isinstance(translated, list) or not all(isinstance(t, str) for t in translated):
            raise TranslatorError("Translator response has no translatedText list", translator=self.name)

        check_result_count(texts, translated)
        logger.debug("Translated %d texts %s->%s", len(texts), source_locale, target_locale)
        return translated
