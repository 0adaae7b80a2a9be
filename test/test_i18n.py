"""
Locale helper and structured logging tests

Test classes:
    TestNormalizeLocales     — option flattening and ordering
    TestLocaleFragments      — base language / attribute-name helpers
    TestStructuredFormatter  — JSON log records with translation extras
"""

from __future__ import annotations

import json
import logging

from autotranslate.i18n import base_language, locale_attribute_fragment, normalize_locales
from autotranslate.utils.logging import StructuredFormatter, setup_structured_logging


class TestNormalizeLocales:
    def test_single_locale(self):
        assert normalize_locales("en") == ("en",)

    def test_none_is_empty(self):
        assert normalize_locales(None) == ()

    def test_nested_lists_are_flattened_in_order(self):
        assert normalize_locales(["de", ["en", None, "fr"]]) == ("de", "en", "fr")

    def test_duplicates_keep_first_position(self):
        assert normalize_locales(["fr", "en", "fr"]) == ("fr", "en")

    def test_blank_entries_are_dropped(self):
        assert normalize_locales(["", "  ", "ja"]) == ("ja",)


class TestLocaleFragments:
    def test_base_language(self):
        assert base_language("fr-CA") == "fr"
        assert base_language("pt_BR") == "pt"
        assert base_language("EN") == "en"

    def test_attribute_fragment(self):
        assert locale_attribute_fragment("fr-CA") == "fr_ca"
        assert locale_attribute_fragment("en") == "en"


class TestStructuredFormatter:
    def _record(self, **extra):
        record = logging.LogRecord("autotranslate.test", logging.WARNING, __file__, 1, "failed %s", ("title",), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_formats_json(self):
        data = json.loads(StructuredFormatter().format(self._record()))
        assert data["level"] == "WARNING"
        assert data["logger"] == "autotranslate.test"
        assert data["message"] == "failed title"

    def test_includes_translation_extras(self):
        data = json.loads(StructuredFormatter().format(self._record(field="title", from_locale="en", to_locale="fr")))
        assert (data["field"], data["from_locale"], data["to_locale"]) == ("title", "en", "fr")
        assert "host_id" not in data

    def test_setup_installs_single_handler(self):
        root = logging.getLogger()
        previous = list(root.handlers), root.level
        try:
            handler = setup_structured_logging("DEBUG", json_format=True)
            assert root.handlers == [handler]
            assert isinstance(handler.formatter, StructuredFormatter)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = previous[0]
            root.setLevel(previous[1])
