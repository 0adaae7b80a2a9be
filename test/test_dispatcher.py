"""
TranslationDispatcher tests

Test classes:
    TestDeferredDispatch   — nothing runs before the commit hook fires
    TestPerform            — writing results, isolation of failures, idempotence
    TestAsynchronousMode   — hand-off to the job queue
"""

from __future__ import annotations

import logging

import pytest

from autotranslate.automatic.policy import FieldLocalePolicy
from autotranslate.exceptions import TranslationCountMismatchError
from autotranslate.translators.base import check_result_count
from utils.mocks import HOST_KEY, FakeTranslator, RecordingJobQueue, make_engine


@pytest.fixture
def policy():
    return FieldLocalePolicy().configure(["title"], ["en"], ["en", "fr", "de"])


@pytest.fixture
def engine(policy):
    engine = make_engine(policy)
    engine.cache.write("title", "en", "Hello")
    return engine


class TestDeferredDispatch:
    def test_dispatch_waits_for_commit(self, engine):
        engine.dispatcher.dispatch("title", "en", "fr")
        assert engine.translator.calls == []
        assert engine.cache.lookup("fr") is None

        engine.hooks.commit()

        assert engine.translator.calls == [(["Hello"], "en", "fr")]
        assert engine.cache.read("title", "fr") == "[fr] Hello"

    def test_source_text_is_read_when_the_work_runs(self, engine):
        engine.dispatcher.dispatch("title", "en", "fr")
        engine.cache.write("title", "en", "Hello again")
        engine.hooks.commit()
        assert engine.cache.get("fr").read("title") == "[fr] Hello again"


class TestPerform:
    def test_success_writes_persists_and_keeps_flag(self, engine):
        record = engine.cache.get("fr")
        assert engine.dispatcher.perform(record, "title", "en", "fr") is True
        assert record.read("title") == "[fr] Hello"
        assert record.is_automatic("title") is True
        assert engine.store.saved == [record]

    def test_pinned_target_is_left_alone(self, engine):
        record = engine.cache.get("fr")
        record.write("title", "Salut")
        record.set_automatic("title", False)
        assert engine.dispatcher.perform(record, "title", "en", "fr") is False
        assert record.read("title") == "Salut"
        assert engine.translator.calls == []

    def test_applying_same_translation_twice_is_idempotent(self, engine):
        record = engine.cache.get("fr")
        engine.dispatcher.perform(record, "title", "en", "fr")
        snapshot = (dict(record.fields), dict(record.automatic_flags))

        assert engine.dispatcher.perform(record, "title", "en", "fr") is True

        assert (dict(record.fields), dict(record.automatic_flags)) == snapshot
        assert engine.store.saved == [record]

    def test_translator_failure_is_isolated(self, policy, caplog):
        engine = make_engine(policy, translator=FakeTranslator(fail_for={"fr"}))
        engine.cache.write("title", "en", "Hello")
        french = engine.cache.get("fr")
        french.write("title", "Ancien")
        french.changed_fields.clear()
        german = engine.cache.get("de")

        engine.dispatcher.dispatch("title", "en", "fr")
        engine.dispatcher.dispatch("title", "en", "de")
        with caplog.at_level(logging.WARNING, logger="autotranslate.automatic.dispatcher"):
            engine.hooks.commit()

        assert french.read("title") == "Ancien"
        assert french.is_automatic("title") is True
        assert german.read("title") == "[de] Hello"
        assert "Simulated outage for fr" in caplog.text

    def test_unexpected_adapter_exception_is_isolated(self, policy, caplog):
        translator = FakeTranslator(raise_for={"fr": TimeoutError("read timed out")})
        engine = make_engine(policy, translator=translator)
        engine.cache.write("title", "en", "Hello")

        engine.dispatcher.dispatch("title", "en", "fr")
        engine.dispatcher.dispatch("title", "en", "de")
        with caplog.at_level(logging.ERROR, logger="autotranslate.automatic.dispatcher"):
            engine.hooks.commit()

        assert engine.cache.read("title", "fr") is None
        assert engine.cache.flag("title", "fr") is True
        assert engine.cache.read("title", "de") == "[de] Hello"
        assert "TimeoutError" in caplog.text

    def test_malformed_result_is_an_adapter_error(self, policy, caplog):
        engine = make_engine(policy, translator=FakeTranslator(malformed_for={"fr"}))
        engine.cache.write("title", "en", "Hello")
        french = engine.cache.get("fr")

        with caplog.at_level(logging.WARNING, logger="autotranslate.automatic.dispatcher"):
            assert engine.dispatcher.perform(french, "title", "en", "fr") is False
        assert engine.dispatcher.translate_into("title", "en", "de") is True

        assert french.read("title") is None
        assert engine.cache.read("title", "de") == "[de] Hello"
        assert "malformed result" in caplog.text

    def test_result_count_mismatch_is_an_adapter_error(self, policy):
        engine = make_engine(policy, translator=FakeTranslator(extra_results=1))
        engine.cache.write("title", "en", "Hello")
        record = engine.cache.get("fr")
        assert engine.dispatcher.perform(record, "title", "en", "fr") is False
        assert record.read("title") is None

    def test_check_result_count(self):
        check_result_count(["a"], ["b"])
        with pytest.raises(TranslationCountMismatchError) as exc_info:
            check_result_count(["a"], [])
        assert exc_info.value.details == {"expected": 1, "received": 0}

    def test_blank_source_blanks_target_without_translator(self, policy):
        engine = make_engine(policy)
        engine.cache.write("title", "en", "")
        record = engine.cache.get("fr")
        record.write("title", "[fr] Old")
        assert engine.dispatcher.perform(record, "title", "en", "fr") is True
        assert record.read("title") == ""
        assert engine.translator.calls == []

    def test_storage_failure_is_isolated(self, engine):
        engine.store.fail_on_save = True
        record = engine.cache.get("fr")
        assert engine.dispatcher.perform(record, "title", "en", "fr") is False
        assert "title" not in record.changed_fields


class TestAsynchronousMode:
    def test_enqueues_after_commit(self, policy):
        queue = RecordingJobQueue()
        engine = make_engine(policy, asynchronously=True, job_queue=queue)
        engine.cache.write("title", "en", "Hello")

        engine.dispatcher.dispatch("title", "en", "fr")
        assert queue.jobs == []
        engine.hooks.commit()

        assert queue.jobs == [(*HOST_KEY, "title", "en", "fr")]
        assert engine.translator.calls == []
        assert engine.cache.lookup("fr") is None

    def test_mode_follows_settings_at_dispatch_time(self, policy, monkeypatch):
        from autotranslate.config import settings

        queue = RecordingJobQueue()
        engine = make_engine(policy, asynchronously=None, job_queue=queue)
        assert engine.dispatcher.runs_asynchronously is False

        monkeypatch.setattr(settings, "automatic_translation_asynchronously", True)
        engine.dispatcher.dispatch("title", "en", "de")
        engine.hooks.commit()

        assert queue.jobs == [(*HOST_KEY, "title", "en", "de")]
