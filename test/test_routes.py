"""
Automatic translation route tests

Routes run against the SQLite test database through a dependency
override of ``get_db``.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from autotranslate.database import get_db
from autotranslate.main import create_app
from utils.models import Article


@pytest.fixture
def app(monkeypatch, session_factory):
    monkeypatch.setattr("autotranslate.main.setup_structured_logging", lambda *args, **kwargs: None)
    app = create_app()

    def override_get_db():
        with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def article(db):
    article = Article(slug="routes")
    db.add(article)
    db.commit()
    article.write_translation("title", "en", "Hello")
    db.commit()
    return article


class TestAppFactory:
    def test_mounts_routes_for_registered_models(self, app):
        paths = app.openapi()["paths"]
        assert "/api/v1/articles/{host_id}/automatic" in paths
        assert "/api/v1/pages/{host_id}/automatic/{field}/{locale}/translate" in paths

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "asynchronous": False}


class TestAutomaticFlagsRoutes:
    def test_get_flags(self, client, article):
        response = client.get(f"/api/v1/articles/{article.id}/automatic")
        assert response.status_code == 200
        data = response.json()
        assert data["host_id"] == article.id
        assert data["flags"]["title_fr_automatic"] is True
        assert data["flags"]["title_en_automatic"] is False

    def test_get_missing_host(self, client, setup_test_database):
        response = client.get("/api/v1/articles/404/automatic")
        assert response.status_code == 404
        assert response.json()["detail"] == "articles with id '404' not found"

    def test_put_flags(self, client, db, article):
        response = client.put(
            f"/api/v1/articles/{article.id}/automatic",
            json={"flags": {"title_fr_automatic": False}},
        )
        assert response.status_code == 200
        assert response.json()["flags"]["title_fr_automatic"] is False

        article.reload_translations()
        assert article.is_automatic("title", "fr") is False

    def test_put_unknown_flag(self, client, article):
        response = client.put(
            f"/api/v1/articles/{article.id}/automatic",
            json={"flags": {"summary_fr_automatic": False}},
        )
        assert response.status_code == 400
        assert "summary_fr_automatic" in response.json()["detail"]


class TestRetranslateRoute:
    def test_retranslate_accepted(self, client, article, fake_translator):
        fake_translator.calls.clear()
        response = client.post(f"/api/v1/articles/{article.id}/automatic/title/de/translate")
        assert response.status_code == 202
        assert response.json() == {"host_id": article.id, "field": "title", "from_locale": "en", "to_locale": "de"}
        assert fake_translator.calls == [(["Hello"], "en", "de")]

    def test_retranslate_with_explicit_source(self, client, article):
        response = client.post(
            f"/api/v1/articles/{article.id}/automatic/title/fr/translate",
            json={"from_locale": "en"},
        )
        assert response.status_code == 202
        assert response.json()["from_locale"] == "en"

    def test_retranslate_unknown_locale(self, client, article):
        response = client.post(f"/api/v1/articles/{article.id}/automatic/title/ja/translate")
        assert response.status_code == 400

    def test_retranslate_into_source(self, client, article):
        response = client.post(f"/api/v1/articles/{article.id}/automatic/title/en/translate")
        assert response.status_code == 400
