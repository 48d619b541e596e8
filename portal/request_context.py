"""
Narrow request adapter for the login handler.

The handler only reads parameters, the JSON body and the session, and only
writes redirects, JSON and the login page. Everything else about the
serving stack stays behind this class.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse, RedirectResponse
from starlette.requests import Request

from Security.csrf_protection import SESSION_KEY as CSRF_SESSION_KEY
from Security.password_data import PasswordData

from .app_context import templates
from .errors import ErrorInformation
from .login_models import AuthenticationType, SessionState, UserIdentity
from .session_state import read_session_state, renew_session

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

LOGIN_TEMPLATE = "login.html"
LOGIN_PASSWORD_ONLY_TEMPLATE = "login_password_only.html"


class LoginRequest:
    def __init__(self, request: Request, settings: Dict[str, Any], form=None, body: bytes = b""):
        self.request = request
        self.settings = settings
        self.form = form
        self.body = body

    @classmethod
    async def from_request(cls, request: Request, settings: Dict[str, Any]) -> "LoginRequest":
        body = b""
        form = None
        if request.method == "POST":
            body = await request.body()
            content_type = (request.headers.get("content-type") or "").lower()
            if content_type.startswith(FORM_CONTENT_TYPES):
                form = await request.form()
        return cls(request, settings, form=form, body=body)

    @property
    def session(self) -> dict:
        return self.request.session

    def read_parameter(self, name: str) -> Optional[str]:
        if self.form is not None:
            value = self.form.get(name)
            if value is not None and isinstance(value, str):
                return value
        return self.request.query_params.get(name)

    def read_password(self, name: str) -> Optional[PasswordData]:
        if self.form is None:
            return None
        value = self.form.get(name)
        if not isinstance(value, str):
            return None
        return PasswordData.from_optional(value)

    def read_json_body(self) -> Optional[Dict[str, Any]]:
        if not self.body:
            return None
        try:
            data = json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return None
        return data if isinstance(data, dict) else None

    def session_state(self) -> SessionState:
        return read_session_state(self.session)

    def renew_session(self, identity: UserIdentity) -> str:
        return renew_session(self.request, identity, AuthenticationType.AUTHENTICATED)

    def redirect(self, url: str) -> RedirectResponse:
        return RedirectResponse(url, status_code=303)

    def json(self, payload: Dict[str, Any], status_code: int = 200) -> JSONResponse:
        return JSONResponse(payload, status_code=status_code)

    def render_login_page(self, password_only: bool, error: Optional[ErrorInformation] = None, status_code: int = 200):
        template = LOGIN_PASSWORD_ONLY_TEMPLATE if password_only else LOGIN_TEMPLATE
        state = self.session_state()
        context = {
            "request": self.request,
            "csrf_token": self.session.get(CSRF_SESSION_KEY, ""),
            "error": error,
            "username": self.read_parameter("username") if error else None,
            "context": self.read_parameter("context") or "",
            "ldap_profile": self.read_parameter("ldapProfile") or "",
            "identity": state.identity,
        }
        return templates.TemplateResponse(request=self.request, name=template, context=context, status_code=status_code)
