from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from portal.directory import create_directory_user
from portal.main import create_app
from tests.helpers.harness import PASSWORD, install_session_probe


@pytest.fixture
def settings():
    return {
        "DATABASE_URL": "sqlite://",
        "SESSION_HTTPS_ONLY": False,
        "SESSION_FINGERPRINT": True,
        "CSRF_ENABLED": True,
        "LOGIN_MAX_ATTEMPTS": 3,
        "POST_LOGIN_URL": "/account",
    }


@pytest.fixture
def app(settings):
    app = create_app(settings)
    install_session_probe(app)
    return app


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    return {
        "alice": create_directory_user(db, "alice", PASSWORD, context="staff"),
        "bob_sales": create_directory_user(db, "bob", PASSWORD, context="sales"),
        "bob_ops": create_directory_user(db, "bob", PASSWORD, context="ops"),
        "carol": create_directory_user(db, "carol", PASSWORD, context="staff", is_active=False),
    }


@pytest.fixture
def client(app, users):
    with TestClient(app) as c:
        # Establish the session so every test starts with a session id.
        c.get("/login")
        yield c
