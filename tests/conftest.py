# tests/conftest.py
from __future__ import annotations

import io

import pytest

from app import create_app
from db import db
from tests.fakes import FakeStorage, FakeVision


# -------- Gateways --------
@pytest.fixture
def vision():
    return FakeVision()


@pytest.fixture
def storage():
    return FakeStorage()


# -------- App & client --------
@pytest.fixture
def app(tmp_path, monkeypatch, vision, storage):
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret-key-with-enough-length")
    app = create_app(
        db_url=f"sqlite:///{tmp_path / 'test.db'}",
        vision_gateway=vision,
        storage_gateway=storage,
    )
    app.config["TESTING"] = True

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# -------- Users & auth --------
@pytest.fixture
def register_user(client):
    """
    Callable that registers a user and returns auth headers for them.

    Usage:
        headers = register_user("alice")
    """

    def _factory(username: str = "traveler", password: str = "password123", **extra) -> dict:
        resp = client.post("/auth/register", data={"username": username, "password": password, **extra})
        assert resp.status_code == 201, resp.get_data(as_text=True)
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _factory


@pytest.fixture
def auth_headers(register_user):
    return register_user()


@pytest.fixture
def trip_id(client, auth_headers):
    resp = client.post("/trips", json={"title": "Paris"}, headers=auth_headers)
    assert resp.status_code == 201
    return resp.get_json()["id"]


@pytest.fixture
def upload_form():
    """
    Callable building a multipart body for POST /trips/<id>.

    Usage:
        client.post(url, data=upload_form(caption="hi"), headers=...)
    """

    def _factory(*, caption: str | None = "Sunset", content: bytes = b"\xff\xd8\xff fake jpeg", filename="paris.jpg"):
        data = {}
        if content is not None:
            data["file"] = (io.BytesIO(content), filename, "image/jpeg")
        if caption is not None:
            data["caption"] = caption
        return data

    return _factory
