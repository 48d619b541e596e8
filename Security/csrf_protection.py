"""
CSRF PROTECTION
===============
Per-session anti-forgery token issue and verification.

FLOW:
- Middleware makes sure every session carries a token.
- Handlers that change state call read_supplied_token() and csrf_token_valid().
- Token is mirrored into a csrf_token cookie for script clients.

WHY:
- Prevents forged cross-site form submissions.

HOW:
- Compares the supplied form/query/header token with the session token.
"""

from __future__ import annotations

import secrets

from starlette.middleware.base import BaseHTTPMiddleware

SESSION_KEY = "_csrf"
FORM_FIELD = "csrf_token"
HEADER_NAME = "x-csrf-token"


def new_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def ensure_csrf_token(session: dict) -> str:
    token = session.get(SESSION_KEY)
    if not token:
        token = new_csrf_token()
        session[SESSION_KEY] = token
    return token


def read_supplied_token(request, form=None) -> str | None:
    if form is not None:
        value = form.get(FORM_FIELD)
        if value:
            return str(value)
    header_token = request.headers.get(HEADER_NAME)
    if header_token:
        return header_token
    return request.query_params.get(FORM_FIELD) or None


def csrf_token_valid(session: dict, supplied: str | None) -> bool:
    expected = session.get(SESSION_KEY)
    if not expected or not supplied:
        return False
    return secrets.compare_digest(str(expected).encode("utf-8"), supplied.encode("utf-8"))


class CSRFMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, cookie_name: str = "csrf_token", enabled: bool = True):
        super().__init__(app)
        self.cookie_name = cookie_name
        self.enabled = enabled

    async def dispatch(self, request, call_next):
        if not self.enabled or "session" not in request.scope:
            return await call_next(request)

        ensure_csrf_token(request.scope["session"])
        response = await call_next(request)

        # The handler may have rotated the token during session renewal.
        token = request.scope.get("session", {}).get(SESSION_KEY)
        if token:
            response.set_cookie(self.cookie_name, token, httponly=False, samesite="lax")
        return response
