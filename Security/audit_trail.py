"""
AUDIT TRAIL
===========
Lightweight audit logging helper.
"""

# FLOW:
# - Call audit() on login outcomes to emit structured audit events.
# - RequestIdMiddleware binds the request context read by audit().
# WHY:
# - Provides accountability for authentication decisions.
# HOW:
# - Emits structured log lines to logs/audit.log.

from __future__ import annotations

import contextvars
import logging
import os
from logging.handlers import RotatingFileHandler

from Security.metrics import increment_feature_event
from Security.secrets_redaction import redact
from Security.security_config import SECURITY_SETTINGS, feature_enabled

_audit_ctx: contextvars.ContextVar[dict[str, str] | None] = contextvars.ContextVar("audit_ctx", default=None)


def _get_logger() -> logging.Logger:
    logger = logging.getLogger("security.audit")
    if logger.handlers:
        return logger

    log_dir = SECURITY_SETTINGS["LOG_DIR"]
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(os.path.join(log_dir, "audit.log"), maxBytes=2_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    return logger


def _client_ip(request) -> str:
    xff = (request.headers.get("x-forwarded-for") or "").strip()
    if xff:
        return xff.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "-"


def set_audit_request_context(request):
    request_id = getattr(request.state, "request_id", "") or request.headers.get("x-request-id", "")
    payload = {
        "ip": _client_ip(request),
        "request_id": str(request_id or "").strip(),
        "path": str(request.url.path or "").strip(),
        "method": str(request.method or "").strip(),
    }
    return _audit_ctx.set(payload)


def clear_audit_request_context(token) -> None:
    _audit_ctx.reset(token)


def audit(event: str, username: str | None = None, details: str | None = None) -> None:
    if not feature_enabled("audit-trail", True):
        return
    ctx = _audit_ctx.get() or {}
    _get_logger().info(
        "event=%s username=%s ip=%s request_id=%s method=%s path=%s details=%s",
        event,
        username or "-",
        ctx.get("ip", "-"),
        ctx.get("request_id", ""),
        ctx.get("method", ""),
        ctx.get("path", ""),
        redact(details or ""),
    )
    increment_feature_event("audit-trail")
