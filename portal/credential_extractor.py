"""Pull raw credentials out of a form post or a JSON body."""

from __future__ import annotations

from Security.input_validation import bound_secret_value, sanitize_input_value
from Security.password_data import PasswordData

from .login_models import LoginAttempt
from .request_context import LoginRequest
from .request_validator import require_json_body

PARAM_USERNAME = "username"
PARAM_PASSWORD = "password"
PARAM_CONTEXT = "context"
PARAM_LDAP_PROFILE = "ldapProfile"


def extract_form_credentials(login_request: LoginRequest, password_only: bool) -> LoginAttempt:
    return LoginAttempt(
        username=login_request.read_parameter(PARAM_USERNAME),
        password=login_request.read_password(PARAM_PASSWORD),
        context=login_request.read_parameter(PARAM_CONTEXT),
        ldap_profile=login_request.read_parameter(PARAM_LDAP_PROFILE),
        password_only=password_only,
    )


def extract_rest_credentials(value_map: dict | None, password_only: bool, max_len: int = 1024) -> LoginAttempt:
    """
    Build an attempt from a decoded JSON body.

    Raises MissingParameter when the body is absent or empty; any other
    shape problem just leaves the affected field empty.
    """
    value_map = require_json_body(value_map)
    return LoginAttempt(
        username=sanitize_input_value(value_map.get(PARAM_USERNAME), max_len),
        password=PasswordData.from_optional(bound_secret_value(value_map.get(PARAM_PASSWORD), max_len)),
        context=sanitize_input_value(value_map.get(PARAM_CONTEXT), max_len),
        ldap_profile=sanitize_input_value(value_map.get(PARAM_LDAP_PROFILE), max_len),
        password_only=password_only,
    )
