"""
Shared login routine behind the form and REST entry points.

``handle_login_request`` validates the attempt, calls the directory, and on
success replaces the session so that a session id fixed before login is
worthless afterwards. Failures come back as ``LoginFailure``; the directory's
error information is passed through untouched.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from Security.audit_trail import audit
from Security.password_data import PasswordData

from .errors import ErrorCode, ErrorInformation, LoginOperationalError, MissingParameter
from .login_models import LoginAttempt, LoginFailure, LoginOutcome, LoginSuccess, UserIdentity

logger = logging.getLogger("portal.login")


class Authenticator(Protocol):
    def search_and_authenticate(
        self, username: str, password: PasswordData, context: str | None, profile: str | None
    ) -> UserIdentity: ...

    def authenticate_known_identity(self, identity: UserIdentity, password: PasswordData) -> UserIdentity: ...


def _authenticate(login_request, attempt: LoginAttempt, authenticator: Authenticator) -> UserIdentity:
    if not attempt.password_only and not attempt.username:
        raise MissingParameter("missing username parameter")

    if not attempt.password:
        raise MissingParameter("missing password parameter")

    if attempt.password_only:
        identity = login_request.session_state().identity
        if identity is None:
            raise LoginOperationalError(
                ErrorInformation.of(ErrorCode.AUTHENTICATION_REQUIRED, "session has no bound identity")
            )
        return authenticator.authenticate_known_identity(identity, attempt.password)

    return authenticator.search_and_authenticate(
        attempt.username, attempt.password, attempt.context, attempt.ldap_profile
    )


def handle_login_request(
    login_request,
    attempt: LoginAttempt,
    authenticator: Authenticator,
    next_url: Callable[[dict], str],
) -> LoginOutcome:
    """
    Run one login attempt against ``authenticator``.

    ``login_request`` must provide ``session``, ``session_state()`` and
    ``renew_session(identity)``. ``next_url`` is called with the renewed
    session to pick the destination for the caller's protocol.
    """
    try:
        identity = _authenticate(login_request, attempt, authenticator)
    except LoginOperationalError as exc:
        audit("auth_login_failed", username=attempt.username, details=exc.error.to_log_string())
        logger.debug("login failed: %s", exc.error.to_log_string())
        return LoginFailure(exc.error)

    # recycle the session to prevent session fixation
    login_request.renew_session(identity)

    audit(
        "auth_login_success",
        username=identity.username,
        details=f"profile={identity.profile};password_only={attempt.password_only}",
    )
    return LoginSuccess(identity=identity, next_url=next_url(login_request.session))
