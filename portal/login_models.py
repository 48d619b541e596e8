"""Request-scoped types passed between the login handler stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from Security.password_data import PasswordData

from .errors import ErrorInformation


class AuthenticationType(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED = "AUTHENTICATED"
    AUTH_WITHOUT_PASSWORD = "AUTH_WITHOUT_PASSWORD"


@dataclass(frozen=True)
class UserIdentity:
    user_id: int
    username: str
    profile: str

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "username": self.username, "profile": self.profile}

    @classmethod
    def from_dict(cls, data) -> Optional["UserIdentity"]:
        if not isinstance(data, dict):
            return None
        try:
            return cls(user_id=int(data["user_id"]), username=str(data["username"]), profile=str(data["profile"]))
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class SessionState:
    is_authenticated: bool = False
    authentication_type: AuthenticationType = AuthenticationType.UNAUTHENTICATED
    identity: Optional[UserIdentity] = None

    @property
    def password_only(self) -> bool:
        """Session already carries an identity that was established without a password."""
        return self.is_authenticated and self.authentication_type == AuthenticationType.AUTH_WITHOUT_PASSWORD


@dataclass(frozen=True)
class LoginAttempt:
    username: Optional[str]
    password: Optional[PasswordData]
    context: Optional[str] = None
    ldap_profile: Optional[str] = None
    password_only: bool = False


@dataclass(frozen=True)
class LoginSuccess:
    identity: UserIdentity
    next_url: str


@dataclass(frozen=True)
class LoginFailure:
    error: ErrorInformation


LoginOutcome = Union[LoginSuccess, LoginFailure]
