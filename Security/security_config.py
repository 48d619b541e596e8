"""
SECURITY CONFIG
===============
Centralized security settings loaded from environment.
"""

# FLOW:
# - Read env vars once and expose SECURITY_SETTINGS.
# - feature_enabled() lets single features be switched off per environment.
# WHY:
# - Centralizes security tuning per environment.
# HOW:
# - Loads the active .env file and stores typed values in a dict.

from __future__ import annotations

import logging
import os
import secrets
from typing import Any, Dict

import dotenv


def get_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


def get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_name() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    if env in {"prod", "production"}:
        return ".env.production"
    if env in {"test", "testing"}:
        return ".env.test"
    return ".env"


def _env_path() -> str:
    root = os.path.dirname(os.path.dirname(__file__))
    return os.path.join(root, _env_name())


def _session_secret() -> str:
    secret = os.getenv("SESSION_SECRET_KEY") or os.getenv("SECRET_KEY")
    placeholders = {"", "change-this-secret", "AUTO_GENERATE"}
    if secret and secret not in placeholders:
        return secret
    # Sessions will not survive a restart without a configured key.
    logging.getLogger("security.env").warning("SESSION_SECRET_KEY not set, using an ephemeral key")
    return secrets.token_urlsafe(64)


def feature_enabled(feature: str, default: bool = True) -> bool:
    """Return whether a security feature is on, e.g. FEATURE_AUDIT_TRAIL=false."""
    env_name = "FEATURE_" + feature.upper().replace("-", "_")
    return get_bool(env_name, default)


def load_settings() -> Dict[str, Any]:
    dotenv.load_dotenv(_env_path())
    if get_bool("APP_ENV_LOG", False):
        logging.getLogger("security.env").info("Active env file: %s", _env_path())

    return {
        "SESSION_SECRET_KEY": _session_secret(),
        "SESSION_COOKIE_NAME": os.getenv("SESSION_COOKIE_NAME", "portal_session"),
        "SESSION_MAX_AGE": get_int("SESSION_MAX_AGE", 60 * 60 * 8),
        "SESSION_IDLE_TIMEOUT": get_int("SESSION_IDLE_TIMEOUT", 60 * 30),
        "SESSION_HTTPS_ONLY": get_bool("SESSION_HTTPS_ONLY", True),
        "SESSION_FINGERPRINT": get_bool("SESSION_FINGERPRINT", True),
        "CSRF_ENABLED": get_bool("CSRF_ENABLED", True),
        "LOGIN_MAX_ATTEMPTS": get_int("LOGIN_MAX_ATTEMPTS", 5),
        "LOGIN_WINDOW": get_int("LOGIN_WINDOW", 300),
        "LOGIN_LOCK": get_int("LOGIN_LOCK", 600),
        "MAX_BODY_BYTES": get_int("MAX_BODY_BYTES", 64 * 1024),
        "INPUT_MAX_LENGTH": get_int("INPUT_MAX_LENGTH", 1024),
        "POST_LOGIN_URL": os.getenv("POST_LOGIN_URL", "/account"),
        "DATABASE_URL": os.getenv("DATABASE_URL", "sqlite:///./portal.db"),
        "LOG_DIR": os.getenv("LOG_DIR", "logs"),
    }


SECURITY_SETTINGS = load_settings()
