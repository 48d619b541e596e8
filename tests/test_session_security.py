from __future__ import annotations

import json
import time
from types import SimpleNamespace

from cryptography.fernet import Fernet
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from Security.session_security import EncryptedSessionMiddleware, _derive_fernet_key, regenerate_session

from portal.login_models import AuthenticationType, UserIdentity
from portal.session_state import (
    PRE_LOGIN_URL_KEY,
    is_local_url,
    post_login_url,
    pre_login_url,
    read_session_state,
    renew_session,
)

SECRET = "unit-test-secret"


def _fake_request(session):
    return SimpleNamespace(
        session=session,
        headers={"user-agent": "pytest"},
        client=SimpleNamespace(host="10.0.0.1"),
    )


def test_regenerate_session_replaces_everything_but_carried_keys():
    session = {"_sid": "old", "_csrf": "old-token", "stale": 1, PRE_LOGIN_URL_KEY: "/reports"}
    request = _fake_request(session)

    new_id = regenerate_session(request, {"fresh": True}, carry_keys=(PRE_LOGIN_URL_KEY,))

    assert new_id != "old"
    assert session["_sid"] == new_id
    assert session["fresh"] is True
    assert session[PRE_LOGIN_URL_KEY] == "/reports"
    assert "stale" not in session
    assert "_csrf" not in session


def test_renew_session_binds_identity_and_new_token():
    session = {"_sid": "old", "_csrf": "old-token"}
    identity = UserIdentity(3, "alice", "default")

    renew_session(_fake_request(session), identity)

    state = read_session_state(session)
    assert state.is_authenticated
    assert state.authentication_type is AuthenticationType.AUTHENTICATED
    assert state.identity == identity
    assert session["_csrf"] not in ("", "old-token")


def test_read_session_state_tolerates_garbage():
    assert not read_session_state({}).is_authenticated
    assert not read_session_state({"auth_type": "BOGUS", "identity": {"user_id": 1}}).is_authenticated
    assert not read_session_state({"auth_type": "AUTHENTICATED", "identity": "alice"}).is_authenticated
    state = read_session_state(
        {"auth_type": "AUTH_WITHOUT_PASSWORD", "identity": {"user_id": "4", "username": "a", "profile": "p"}}
    )
    assert state.password_only


def test_navigation_urls():
    settings = {"POST_LOGIN_URL": "/account"}
    assert pre_login_url({}, settings) == "/account"
    assert post_login_url({"_forward_url": "/x", PRE_LOGIN_URL_KEY: "/y"}, settings) == "/x"
    assert post_login_url({PRE_LOGIN_URL_KEY: "/y"}, settings) == "/y"

    assert is_local_url("/a/b?c=1")
    for url in (None, "", "https://evil.example", "//evil.example", "/\\evil", "relative"):
        assert not is_local_url(url)


def _session_app(**kwargs):
    app = FastAPI()
    app.add_middleware(EncryptedSessionMiddleware, secret_key=SECRET, https_only=False, **kwargs)

    @app.get("/count")
    async def count(request: Request):
        request.session["n"] = request.session.get("n", 0) + 1
        return {"n": request.session["n"]}

    return app


def test_session_roundtrip_is_encrypted():
    with TestClient(_session_app()) as client:
        assert client.get("/count").json() == {"n": 1}
        assert client.get("/count").json() == {"n": 2}
        cookie = client.cookies.get("session")

        payload = json.loads(Fernet(_derive_fernet_key(SECRET)).decrypt(cookie.encode()))
        assert payload["data"]["n"] == 2
        assert payload["data"]["_sid"]


def test_tampered_cookie_starts_new_session():
    with TestClient(_session_app()) as client:
        client.get("/count")
        client.cookies.clear()
        client.cookies.set("session", "not-a-fernet-token")
        assert client.get("/count").json() == {"n": 1}


def test_expired_session_is_dropped():
    fernet = Fernet(_derive_fernet_key(SECRET))
    past = int(time.time()) - 3600
    stale = fernet.encrypt(
        json.dumps({"data": {"n": 5}, "iat": past, "last": past, "exp": past + 60}).encode()
    ).decode()

    with TestClient(_session_app(), cookies={"session": stale}) as client:
        assert client.get("/count").json() == {"n": 1}
