"""
Protocol adapters around ``handle_login_request``.

Form logins redirect on success and re-render the page on failure. REST
logins always answer with a JSON result body.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from Security.metrics import record_login_attempt

from .credential_extractor import extract_form_credentials, extract_rest_credentials
from .errors import ErrorInformation, MissingParameter
from .login_models import LoginFailure
from .login_orchestrator import Authenticator, handle_login_request
from .request_context import LoginRequest
from .session_state import post_login_url, pre_login_url

logger = logging.getLogger("portal.login")


def rest_result(data: Optional[Dict[str, Any]] = None, error: Optional[ErrorInformation] = None) -> Dict[str, Any]:
    if error is not None:
        return {
            "error": True,
            "errorCode": int(error.code),
            "errorMessage": error.message,
            "errorDetail": error.detail,
            "data": None,
        }
    return {"error": False, "errorCode": 0, "errorMessage": None, "errorDetail": None, "data": data}


def process_form_login(login_request: LoginRequest, authenticator: Authenticator, password_only: bool):
    attempt = extract_form_credentials(login_request, password_only)
    settings = login_request.settings
    outcome = handle_login_request(
        login_request, attempt, authenticator, next_url=lambda session: pre_login_url(session, settings)
    )

    if isinstance(outcome, LoginFailure):
        record_login_attempt("form", "failure")
        return login_request.render_login_page(password_only, error=outcome.error)

    record_login_attempt("form", "success")
    return login_request.redirect(outcome.next_url)


def process_rest_login(login_request: LoginRequest, authenticator: Authenticator, password_only: bool):
    settings = login_request.settings
    try:
        attempt = extract_rest_credentials(
            login_request.read_json_body(), password_only, max_len=settings.get("INPUT_MAX_LENGTH", 1024)
        )
    except MissingParameter as exc:
        record_login_attempt("rest", "failure")
        return login_request.json(rest_result(error=exc.error))

    outcome = handle_login_request(
        login_request, attempt, authenticator, next_url=lambda session: post_login_url(session, settings)
    )

    if isinstance(outcome, LoginFailure):
        record_login_attempt("rest", "failure")
        return login_request.json(rest_result(error=outcome.error))

    record_login_attempt("rest", "success")
    logger.debug("rest login succeeded for %s", outcome.identity.username)
    return login_request.json(rest_result(data={"nextURL": outcome.next_url}))
