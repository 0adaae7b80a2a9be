"""
Pytest configuration and fixtures for autotranslate tests
"""

import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from autotranslate.config import settings  # noqa: E402
from autotranslate.database import Base, TranslatingSession  # noqa: E402
from autotranslate.translators import set_translator  # noqa: E402
from utils.mocks import FakeTranslator  # noqa: E402
from utils.models import Article, Page  # noqa: E402, F401

# SQLite in-memory database shared by every session through a single connection
TEST_DATABASE_URL = "sqlite://"

test_engine = create_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = sessionmaker(
    bind=test_engine,
    class_=TranslatingSession,
    autoflush=False,
)


@pytest.fixture(scope="function")
def setup_test_database():
    """Create every table before the test and drop them afterwards"""
    Base.metadata.drop_all(test_engine)
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture(scope="function")
def db(setup_test_database):
    """Provide a TranslatingSession bound to the test database"""
    with TestSessionLocal() as session:
        yield session


@pytest.fixture(autouse=True)
def fake_translator():
    """Install a deterministic translator for every test"""
    translator = FakeTranslator()
    set_translator(translator)
    yield translator
    set_translator(None)


@pytest.fixture(autouse=True)
def synchronous_translation(monkeypatch):
    """Run translations inline unless a test opts into the background queue"""
    monkeypatch.setattr(settings, "automatic_translation_asynchronously", False)


@pytest.fixture
def session_factory(monkeypatch):
    """Point background jobs at the test database"""
    monkeypatch.setattr("autotranslate.scheduler.SessionLocal", TestSessionLocal)
    return TestSessionLocal
