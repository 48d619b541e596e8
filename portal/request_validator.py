from __future__ import annotations

from Security.csrf_protection import csrf_token_valid, read_supplied_token

from .errors import InvalidRequestToken, MissingParameter
from .request_context import LoginRequest


def validate_form_id(login_request: LoginRequest) -> None:
    """Reject the request unless it carries this session's anti-forgery token."""
    if not login_request.settings.get("CSRF_ENABLED", True):
        return
    supplied = read_supplied_token(login_request.request, login_request.form)
    if supplied is None:
        raise InvalidRequestToken("anti-forgery token missing")
    if not csrf_token_valid(login_request.session, supplied):
        raise InvalidRequestToken("anti-forgery token does not match session")


def require_json_body(value_map: dict | None) -> dict:
    if not value_map:
        raise MissingParameter("missing json request body")
    return value_map
