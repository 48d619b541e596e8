from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI

from Security.activity_logging import ActivityLoggingMiddleware
from Security.csrf_protection import CSRFMiddleware
from Security.headers_hardening import SecurityHeadersMiddleware
from Security.input_length_limits import MaxBodySizeMiddleware
from Security.password_cracking import create_login_limiter
from Security.request_id import RequestIdMiddleware
from Security.security_config import SECURITY_SETTINGS
from Security.session_security import EncryptedSessionMiddleware

from .account_routes import register_account_routes
from .database import build_engine, build_session_factory, init_db
from .error_handlers import register_error_handlers
from .login_routes import register_login_routes

logger = logging.getLogger("portal")


def create_app(settings: Optional[Dict[str, Any]] = None) -> FastAPI:
    settings = {**SECURITY_SETTINGS, **(settings or {})}

    app = FastAPI(title="Login Portal", docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.engine = build_engine(settings["DATABASE_URL"])
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.login_limiter = create_login_limiter(settings)
    init_db(app.state.engine)

    # Added innermost first.
    app.add_middleware(CSRFMiddleware, enabled=settings["CSRF_ENABLED"])
    app.add_middleware(
        EncryptedSessionMiddleware,
        secret_key=settings["SESSION_SECRET_KEY"],
        cookie_name=settings["SESSION_COOKIE_NAME"],
        max_age_seconds=settings["SESSION_MAX_AGE"],
        idle_timeout_seconds=settings["SESSION_IDLE_TIMEOUT"],
        https_only=settings["SESSION_HTTPS_ONLY"],
        enforce_fingerprint=settings["SESSION_FINGERPRINT"],
    )
    app.add_middleware(MaxBodySizeMiddleware, max_bytes=settings["MAX_BODY_BYTES"])
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ActivityLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_login_routes(app)
    register_account_routes(app)
    register_error_handlers(app)

    logger.info("login portal ready (database=%s)", app.state.engine.url.get_backend_name())
    return app
