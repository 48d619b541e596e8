from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .app_context import LoginRedirect, templates
from .errors import ErrorInformation, InvalidRequestToken
from .login_responses import rest_result

logger = logging.getLogger("portal.errors")


def _wants_json(request: Request) -> bool:
    action = getattr(request.state, "login_action", None)
    if action == "restLogin":
        return True
    if action == "login":
        return False
    content_type = (request.headers.get("content-type") or "").lower()
    if content_type.startswith("application/json"):
        return True
    accept = (request.headers.get("accept") or "").lower()
    return "text/html" not in accept


def _error_title(status_code: int) -> str:
    if status_code == 400:
        return "Bad request"
    if status_code == 401:
        return "Authentication required"
    if status_code == 403:
        return "Access denied"
    if status_code == 404:
        return "Page not found"
    if status_code == 405:
        return "Method not allowed"
    if status_code >= 500:
        return "Internal server error"
    return "Request failed"


def _detail_from_exc(exc: Any, fallback: str) -> str:
    raw = getattr(exc, "detail", None)
    if isinstance(raw, str) and raw.strip():
        return raw
    if raw is not None:
        return str(raw)
    return fallback


def _render_error_page(request: Request, status_code: int, message: str, error: ErrorInformation | None = None):
    return templates.TemplateResponse(
        request=request,
        name="error.html",
        context={
            "status_code": status_code,
            "error_title": _error_title(status_code),
            "message": message,
            "error": error,
        },
        status_code=status_code,
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LoginRedirect)
    async def login_redirect_handler(request: Request, exc: LoginRedirect):
        return RedirectResponse("/login", status_code=303)

    @app.exception_handler(InvalidRequestToken)
    async def invalid_request_token_handler(request: Request, exc: InvalidRequestToken):
        logger.warning("rejected request with bad anti-forgery token: %s", exc.error.detail)
        if _wants_json(request):
            return JSONResponse(rest_result(error=exc.error), status_code=400)
        return _render_error_page(request, 400, exc.error.message, exc.error)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if not _wants_json(request):
            return _render_error_page(request, exc.status_code, _detail_from_exc(exc, _error_title(exc.status_code)))
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        if not _wants_json(request):
            return _render_error_page(request, 500, "The server hit an unexpected condition while processing your request.")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
