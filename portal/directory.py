"""
User directory backing the login handler.

``DirectoryAuthenticator`` is the authentication capability the orchestrator
calls. Every failure is raised as ``AuthenticationFailure`` carrying an
``ErrorInformation`` that the login handler passes through unchanged.
"""

from __future__ import annotations

import datetime
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from Security.password_cracking import LoginRateLimiter
from Security.password_data import PasswordData
from Security.password_hash import hash_password, verify_password

from .errors import AuthenticationFailure, ErrorCode, ErrorInformation
from .login_models import UserIdentity
from .models import DEFAULT_PROFILE, DirectoryUser

logger = logging.getLogger("portal.directory")


def _fail(code: ErrorCode, detail: str) -> AuthenticationFailure:
    return AuthenticationFailure(ErrorInformation.of(code, detail))


class DirectoryAuthenticator:
    def __init__(self, db: Session, limiter: LoginRateLimiter):
        self.db = db
        self.limiter = limiter

    def search_and_authenticate(
        self,
        username: str,
        password: PasswordData,
        context: str | None = None,
        profile: str | None = None,
    ) -> UserIdentity:
        user = self._search(username, context, profile)
        return self._verify(user, password)

    def authenticate_known_identity(self, identity: UserIdentity, password: PasswordData) -> UserIdentity:
        try:
            user = self.db.get(DirectoryUser, identity.user_id)
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc
        if user is None or user.profile != identity.profile:
            raise _fail(ErrorCode.CANT_MATCH_USER, f"user {identity.username} no longer exists")
        return self._verify(user, password)

    def _search(self, username: str, context: str | None, profile: str | None) -> DirectoryUser:
        try:
            query = self.db.query(DirectoryUser).filter(DirectoryUser.username_key == username.strip().lower())
            if context:
                query = query.filter(func.lower(DirectoryUser.context) == context.strip().lower())
            if profile:
                query = query.filter(DirectoryUser.profile == profile)
            matches = query.limit(2).all()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc

        if not matches:
            raise _fail(ErrorCode.CANT_MATCH_USER, f"no user found for username {username}")
        if len(matches) > 1:
            raise _fail(ErrorCode.MULTIPLE_MATCHES, f"multiple users found for username {username}")
        return matches[0]

    def _verify(self, user: DirectoryUser, password: PasswordData) -> UserIdentity:
        key = f"{user.profile}:{user.id}"
        if self.limiter.is_locked(key):
            raise _fail(ErrorCode.INTRUDER_USER, f"user {user.username} is locked")
        if not user.is_active:
            raise _fail(ErrorCode.ACCOUNT_DISABLED, f"user {user.username} is disabled")
        if not verify_password(password.reveal(), user.password_hash):
            self.limiter.record_failure(key)
            raise _fail(ErrorCode.WRONG_PASSWORD, f"bad password for user {user.username}")

        self.limiter.reset(key)
        user.last_login_at = datetime.datetime.now(datetime.timezone.utc)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._unavailable(exc) from exc
        return UserIdentity(user_id=user.id, username=user.username, profile=user.profile)

    def _unavailable(self, exc: SQLAlchemyError) -> AuthenticationFailure:
        self.db.rollback()
        logger.error("directory query failed: %s", exc.__class__.__name__)
        return _fail(ErrorCode.DIRECTORY_UNAVAILABLE, "directory query failed")


def create_directory_user(
    db: Session,
    username: str,
    password: str,
    context: str = "",
    profile: str = DEFAULT_PROFILE,
    display_name: str | None = None,
    is_active: bool = True,
) -> DirectoryUser:
    user = DirectoryUser(
        username=username,
        username_key=username.strip().lower(),
        context=context,
        profile=profile or DEFAULT_PROFILE,
        display_name=display_name,
        password_hash=hash_password(password),
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_user_active(db: Session, username: str, is_active: bool, profile: str | None = None) -> int:
    query = db.query(DirectoryUser).filter(DirectoryUser.username_key == username.strip().lower())
    if profile:
        query = query.filter(DirectoryUser.profile == profile)
    count = 0
    for user in query.all():
        user.is_active = is_active
        count += 1
    db.commit()
    return count
