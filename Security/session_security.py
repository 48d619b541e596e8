"""
SESSION SECURITY
================
Encrypted, HttpOnly sessions with expiration and regeneration support.

FLOW:
- Middleware decrypts cookie into request.session.
- On response, session is encrypted back into cookie.
- regenerate_session() replaces the session wholesale after login.

WHY:
- Protects session data from client-side tampering.
- A fresh session id after login defeats session fixation.

HOW:
- Encrypts session payload with Fernet and sets HttpOnly/Secure flags.
"""

from __future__ import annotations

import base64
import hashlib
import json
import secrets
import time
from typing import Any, Dict, Iterable

from cryptography.fernet import Fernet, InvalidToken
from starlette.middleware.base import BaseHTTPMiddleware

SESSION_ID_KEY = "_sid"
LOCAL_HOSTS = {"127.0.0.1", "::1", "localhost"}


def _derive_fernet_key(secret: str) -> bytes:
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


def _fingerprint(user_agent: str | None, ip: str | None) -> str:
    raw = f"{user_agent or ''}|{ip or ''}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def request_fingerprint(request) -> str:
    return _fingerprint(
        request.headers.get("user-agent"),
        request.client.host if request.client else None,
    )


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class EncryptedSessionMiddleware(BaseHTTPMiddleware):
    """
    Encrypted session cookie middleware.

    - Encrypts session data with Fernet (AES in CBC + HMAC)
    - Sets HttpOnly and Secure flags
    - Supports absolute and idle session expiration
    - Optional session fingerprint validation
    """

    def __init__(
        self,
        app,
        secret_key: str,
        cookie_name: str = "session",
        max_age_seconds: int = 60 * 60 * 8,
        idle_timeout_seconds: int = 60 * 30,
        https_only: bool = True,
        same_site: str = "lax",
        path: str = "/",
        enforce_fingerprint: bool = True,
    ):
        super().__init__(app)
        self.cookie_name = cookie_name
        self.max_age_seconds = max_age_seconds
        self.idle_timeout_seconds = idle_timeout_seconds
        self.https_only = https_only
        self.same_site = same_site
        self.path = path
        self.enforce_fingerprint = enforce_fingerprint
        self.fernet = Fernet(_derive_fernet_key(secret_key))

    def _load(self, request, now: int) -> Dict[str, Any]:
        cookie = request.cookies.get(self.cookie_name)
        if not cookie:
            return {}
        try:
            payload = self.fernet.decrypt(cookie.encode("utf-8"))
            data = json.loads(payload.decode("utf-8"))
            session = data.get("data", {})
            created = int(data.get("iat", now))
            last_seen = int(data.get("last", now))
            exp = data.get("exp")
        except (InvalidToken, ValueError, TypeError, AttributeError):
            return {}

        if exp is not None and now > int(exp):
            return {}
        if self.idle_timeout_seconds and (now - last_seen) > self.idle_timeout_seconds:
            return {}
        if self.enforce_fingerprint and session:
            expected = session.get("_fp")
            if expected and expected != request_fingerprint(request):
                return {}
        session.setdefault("_created", created)
        return session

    async def dispatch(self, request, call_next):
        now = int(time.time())
        request.scope["session"] = self._load(request, now)

        response = await call_next(request)

        session = request.scope.get("session", {})
        if not session:
            response.delete_cookie(self.cookie_name, path=self.path)
            return response

        created = int(session.setdefault("_created", now))
        session.setdefault(SESSION_ID_KEY, new_session_id())
        session["_last_seen"] = now
        if self.enforce_fingerprint and "_fp" not in session:
            session["_fp"] = request_fingerprint(request)

        data = {
            "data": session,
            "iat": created,
            "last": now,
            "exp": created + self.max_age_seconds if self.max_age_seconds else None,
        }
        token = self.fernet.encrypt(json.dumps(data).encode("utf-8")).decode("utf-8")

        secure_flag = self.https_only
        client_host = request.client.host if request.client else ""
        if client_host in LOCAL_HOSTS:
            secure_flag = False

        response.set_cookie(
            self.cookie_name,
            token,
            max_age=self.max_age_seconds or None,
            httponly=True,
            secure=secure_flag,
            samesite=self.same_site,
            path=self.path,
        )
        return response


def regenerate_session(request, values: Dict[str, Any], carry_keys: Iterable[str] = ()) -> str:
    """
    Replace the session wholesale with a new identifier.

    Only ``carry_keys`` survive from the old session; everything else,
    including the old id and anti-forgery token, is dropped. Returns the
    new session id.
    """
    session = request.session
    carried = {key: session[key] for key in carry_keys if key in session}
    now = int(time.time())
    session_id = new_session_id()

    session.clear()
    session.update(carried)
    session.update(values)
    session[SESSION_ID_KEY] = session_id
    session["_created"] = now
    session["_last_seen"] = now
    session["_fp"] = request_fingerprint(request)
    return session_id
