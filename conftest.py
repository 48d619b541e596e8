"""
Root conftest for all tests.

Security.security_config reads the environment at import time, so test
defaults have to be in place before any project module is imported.
"""

import os
import tempfile

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="portal-logs-"))
os.environ.setdefault("DATABASE_URL", "sqlite://")
