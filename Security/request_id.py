"""
REQUEST ID
==========
Attach a unique request id for traceability.
"""

# FLOW:
# - Middleware sets/echoes x-request-id for every request.
# - Binds the audit context for the duration of the request.
# WHY:
# - Helps correlate access and audit logs for one login attempt.
# HOW:
# - Adds a UUID per request and returns it in response headers.

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware

from Security.audit_trail import clear_audit_request_context, set_audit_request_context


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = set_audit_request_context(request)
        try:
            response = await call_next(request)
        finally:
            clear_audit_request_context(token)
        response.headers["x-request-id"] = request_id
        return response
