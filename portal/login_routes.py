from __future__ import annotations

from enum import Enum
from typing import Optional

from fastapi import Depends, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from .app_context import get_authenticator, get_settings
from .directory import DirectoryAuthenticator
from .login_responses import process_form_login, process_rest_login
from .request_context import LoginRequest
from .request_validator import validate_form_id
from .session_state import store_forward_url

PARAM_ACTION_REQUEST = "processAction"
PARAM_FORWARD_URL = "forwardURL"


class LoginAction(str, Enum):
    login = "login"
    restLogin = "restLogin"

    @property
    def permitted_methods(self) -> tuple[str, ...]:
        return ("POST",)


def read_process_action(login_request: LoginRequest) -> Optional[LoginAction]:
    value = login_request.read_parameter(PARAM_ACTION_REQUEST)
    try:
        return LoginAction(value)
    except ValueError:
        return None


def register_login_routes(app):
    @app.api_route("/login", methods=["GET", "POST"])
    async def login(
        request: Request,
        authenticator: DirectoryAuthenticator = Depends(get_authenticator),
        settings: dict = Depends(get_settings),
    ):
        login_request = await LoginRequest.from_request(request, settings)
        # Decided before any credential is processed and reused on re-render.
        password_only = login_request.session_state().password_only

        action = read_process_action(login_request)
        if action is not None:
            request.state.login_action = action.value
            if request.method not in action.permitted_methods:
                raise HTTPException(status_code=405, detail=f"{action.value} requires POST")
            validate_form_id(login_request)

            # Directory lookups and bcrypt block, so they run off the event loop.
            if action is LoginAction.login:
                return await run_in_threadpool(process_form_login, login_request, authenticator, password_only)
            return await run_in_threadpool(process_rest_login, login_request, authenticator, password_only)

        store_forward_url(request.session, request.query_params.get(PARAM_FORWARD_URL))
        return login_request.render_login_page(password_only)
