"""
PASSWORD CRACKING PROTECTION
============================
In-memory intruder lockout for directory authentication.
"""

# FLOW:
# - Track failed attempts per account key and lock after threshold.
# - A successful authentication clears the key.
# WHY:
# - Prevents credential stuffing and brute-force attacks.
# HOW:
# - Sliding window of failure timestamps with a lockout deadline.

from __future__ import annotations

import threading
import time
from collections import defaultdict


class LoginRateLimiter:
    def __init__(self, max_attempts: int = 5, window_seconds: int = 300, lock_seconds: int = 600, clock=time.time):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.lock_seconds = lock_seconds
        self._clock = clock
        self._attempts = defaultdict(list)
        self._locked_until = {}
        self._lock = threading.Lock()

    def _cleanup(self, key: str, now: float) -> None:
        self._attempts[key] = [t for t in self._attempts[key] if now - t <= self.window_seconds]
        if not self._attempts[key]:
            del self._attempts[key]
        if key in self._locked_until and now >= self._locked_until[key]:
            del self._locked_until[key]

    def is_locked(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            self._cleanup(key, now)
            return key in self._locked_until

    def record_failure(self, key: str) -> None:
        with self._lock:
            now = self._clock()
            self._attempts[key].append(now)
            self._cleanup(key, now)
            if len(self._attempts.get(key, ())) >= self.max_attempts:
                self._locked_until[key] = now + self.lock_seconds

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)
            self._locked_until.pop(key, None)


def create_login_limiter(settings: dict) -> LoginRateLimiter:
    return LoginRateLimiter(
        max_attempts=settings["LOGIN_MAX_ATTEMPTS"],
        window_seconds=settings["LOGIN_WINDOW"],
        lock_seconds=settings["LOGIN_LOCK"],
    )
