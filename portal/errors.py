"""Error codes and exceptions shared by the login handler and the directory."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCode(IntEnum):
    WRONG_PASSWORD = 5001
    CANT_MATCH_USER = 5002
    MULTIPLE_MATCHES = 5003
    ACCOUNT_DISABLED = 5004
    INTRUDER_USER = 5005
    AUTHENTICATION_REQUIRED = 5006
    MISSING_PARAMETER = 5021
    INVALID_FORM_ID = 5022
    DIRECTORY_UNAVAILABLE = 5051


DEFAULT_MESSAGES = {
    ErrorCode.WRONG_PASSWORD: "Incorrect username or password.",
    ErrorCode.CANT_MATCH_USER: "Incorrect username or password.",
    ErrorCode.MULTIPLE_MATCHES: "The username matches more than one account. Select a context and try again.",
    ErrorCode.ACCOUNT_DISABLED: "This account is disabled.",
    ErrorCode.INTRUDER_USER: "Too many failed attempts. The account is temporarily locked.",
    ErrorCode.AUTHENTICATION_REQUIRED: "Authentication is required.",
    ErrorCode.MISSING_PARAMETER: "A required field is missing.",
    ErrorCode.INVALID_FORM_ID: "The request token is invalid or has expired. Reload the page and try again.",
    ErrorCode.DIRECTORY_UNAVAILABLE: "The directory is unavailable. Try again later.",
}


@dataclass(frozen=True)
class ErrorInformation:
    code: ErrorCode
    message: str
    detail: str | None = None

    @classmethod
    def of(cls, code: ErrorCode, detail: str | None = None) -> "ErrorInformation":
        return cls(code=code, message=DEFAULT_MESSAGES[code], detail=detail)

    def to_log_string(self) -> str:
        text = f"{self.code.name} ({int(self.code)})"
        if self.detail:
            text += f": {self.detail}"
        return text


class LoginOperationalError(Exception):
    """A recoverable failure that is reported back to the user."""

    def __init__(self, error: ErrorInformation):
        super().__init__(error.to_log_string())
        self.error = error


class MissingParameter(LoginOperationalError):
    def __init__(self, detail: str):
        super().__init__(ErrorInformation.of(ErrorCode.MISSING_PARAMETER, detail))


class InvalidRequestToken(LoginOperationalError):
    def __init__(self, detail: str = "anti-forgery token missing or invalid"):
        super().__init__(ErrorInformation.of(ErrorCode.INVALID_FORM_ID, detail))


class AuthenticationFailure(LoginOperationalError):
    """Raised by the directory; the wrapped error is passed through as-is."""
