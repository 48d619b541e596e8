"""
Login view of the request session.

The session dict is owned by ``EncryptedSessionMiddleware``; this module only
knows which keys the login flow reads and writes.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from Security.csrf_protection import SESSION_KEY as CSRF_SESSION_KEY, new_csrf_token
from Security.session_security import regenerate_session

from .login_models import AuthenticationType, SessionState, UserIdentity

AUTH_TYPE_KEY = "auth_type"
IDENTITY_KEY = "identity"
USERNAME_KEY = "username"
PRE_LOGIN_URL_KEY = "_pre_login_url"
FORWARD_URL_KEY = "_forward_url"

# Navigation survives renewal; identity, tokens and everything else do not.
CARRIED_KEYS = (PRE_LOGIN_URL_KEY, FORWARD_URL_KEY)


def read_session_state(session: dict) -> SessionState:
    try:
        auth_type = AuthenticationType(session.get(AUTH_TYPE_KEY, AuthenticationType.UNAUTHENTICATED.value))
    except ValueError:
        auth_type = AuthenticationType.UNAUTHENTICATED
    identity = UserIdentity.from_dict(session.get(IDENTITY_KEY))
    if identity is None or auth_type == AuthenticationType.UNAUTHENTICATED:
        return SessionState()
    return SessionState(is_authenticated=True, authentication_type=auth_type, identity=identity)


def renew_session(request, identity: UserIdentity, auth_type: AuthenticationType = AuthenticationType.AUTHENTICATED) -> str:
    """Replace the session with a new id bound to ``identity``; returns the new id."""
    return regenerate_session(
        request,
        values={
            AUTH_TYPE_KEY: auth_type.value,
            IDENTITY_KEY: identity.to_dict(),
            USERNAME_KEY: identity.username,
            CSRF_SESSION_KEY: new_csrf_token(),
        },
        carry_keys=CARRIED_KEYS,
    )


def is_local_url(url: str | None) -> bool:
    if not url or not url.startswith("/") or url.startswith("//") or "\\" in url:
        return False
    parts = urlsplit(url)
    return not parts.scheme and not parts.netloc


def store_pre_login_url(session: dict, url: str) -> None:
    if is_local_url(url):
        session[PRE_LOGIN_URL_KEY] = url


def store_forward_url(session: dict, url: str | None) -> None:
    if is_local_url(url):
        session[FORWARD_URL_KEY] = url


def pre_login_url(session: dict, settings: dict) -> str:
    """Where the user was heading when login interrupted them."""
    return session.get(PRE_LOGIN_URL_KEY) or settings["POST_LOGIN_URL"]


def post_login_url(session: dict, settings: dict) -> str:
    """Where an API client should navigate after a successful login."""
    return session.get(FORWARD_URL_KEY) or session.get(PRE_LOGIN_URL_KEY) or settings["POST_LOGIN_URL"]
