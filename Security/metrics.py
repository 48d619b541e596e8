"""
SECURITY METRICS
================
Prometheus-backed metrics for login and security features.
"""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest

from Security.security_config import feature_enabled

REGISTRY = CollectorRegistry(auto_describe=True)

FEATURE_EVENTS = Counter(
    "security_feature_events_total",
    "Count of security feature events",
    ["feature"],
    registry=REGISTRY,
)

LOGIN_ATTEMPTS = Counter(
    "login_attempts_total",
    "Login attempts by protocol and outcome",
    ["protocol", "outcome"],
    registry=REGISTRY,
)


def increment_feature_event(feature: str, amount: int = 1) -> None:
    if not feature_enabled("metrics", True):
        return
    FEATURE_EVENTS.labels(feature=feature).inc(amount)


def record_login_attempt(protocol: str, outcome: str) -> None:
    if not feature_enabled("metrics", True):
        return
    LOGIN_ATTEMPTS.labels(protocol=protocol, outcome=outcome).inc()


def render_latest() -> tuple[bytes, str]:
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
