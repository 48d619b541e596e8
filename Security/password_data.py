"""
PASSWORD DATA
=============
Opaque holder for a user supplied secret.
"""

# FLOW:
# - Wrap raw secrets as soon as they are read from a request.
# - Call reveal() only at the point of verification.
# WHY:
# - Keeps secrets out of logs, tracebacks and template contexts.
# HOW:
# - Masks repr/str and refuses equality with plain strings.

from __future__ import annotations

import secrets

MASK = "********"


class PasswordData:
    __slots__ = ("_value",)

    def __init__(self, value: str):
        if not isinstance(value, str):
            raise TypeError("password value must be a string")
        self._value = value

    @classmethod
    def from_optional(cls, value: str | None) -> "PasswordData | None":
        if not value:
            return None
        return cls(value)

    def reveal(self) -> str:
        return self._value

    def matches(self, other: "PasswordData") -> bool:
        return secrets.compare_digest(self._value.encode("utf-8"), other.reveal().encode("utf-8"))

    def __len__(self) -> int:
        return len(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PasswordData):
            return NotImplemented
        return self.matches(other)

    def __repr__(self) -> str:
        return f"PasswordData({MASK})"

    __str__ = __repr__
