from __future__ import annotations

from Security.password_data import PasswordData

from portal.errors import ErrorCode, ErrorInformation
from portal.login_models import LoginAttempt, LoginFailure, LoginSuccess, UserIdentity
from portal.login_orchestrator import handle_login_request
from tests.helpers.fakes import FakeAuthenticator, FakeLoginRequest, password_only_session


def _next_url(session):
    return "/next"


def _attempt(username="alice", password="s3cret", password_only=False, **kw):
    return LoginAttempt(
        username=username,
        password=PasswordData.from_optional(password),
        password_only=password_only,
        **kw,
    )


def test_full_login_searches_and_renews_session():
    req = FakeLoginRequest()
    auth = FakeAuthenticator()

    outcome = handle_login_request(req, _attempt(context="staff", ldap_profile="corp"), auth, _next_url)

    assert isinstance(outcome, LoginSuccess)
    assert outcome.next_url == "/next"
    assert outcome.identity.username == "alice"
    assert auth.calls == [("search", "alice", "staff", "corp")]
    assert req.renewals == 1
    assert req.session["_sid"] != "fixed-by-attacker"


def test_missing_username_never_reaches_directory():
    req = FakeLoginRequest()
    auth = FakeAuthenticator()

    for username in (None, ""):
        outcome = handle_login_request(req, _attempt(username=username), auth, _next_url)
        assert isinstance(outcome, LoginFailure)
        assert outcome.error.code is ErrorCode.MISSING_PARAMETER
        assert outcome.error.detail == "missing username parameter"

    assert auth.calls == []
    assert req.renewals == 0


def test_missing_password_never_reaches_directory():
    req = FakeLoginRequest()
    auth = FakeAuthenticator()

    outcome = handle_login_request(req, _attempt(password=None), auth, _next_url)

    assert isinstance(outcome, LoginFailure)
    assert outcome.error.code is ErrorCode.MISSING_PARAMETER
    assert outcome.error.detail == "missing password parameter"
    assert auth.calls == []


def test_password_only_does_not_need_username():
    identity = UserIdentity(7, "alice", "default")
    req = FakeLoginRequest(password_only_session(identity))
    auth = FakeAuthenticator()

    outcome = handle_login_request(req, _attempt(username=None, password_only=True), auth, _next_url)

    assert isinstance(outcome, LoginSuccess)
    assert auth.calls == [("known", identity)]
    assert req.renewals == 1
    assert req.session["_sid"] != "pre-login"


def test_password_only_still_requires_password():
    req = FakeLoginRequest(password_only_session())
    auth = FakeAuthenticator()

    outcome = handle_login_request(req, _attempt(username=None, password=None, password_only=True), auth, _next_url)

    assert isinstance(outcome, LoginFailure)
    assert outcome.error.code is ErrorCode.MISSING_PARAMETER
    assert auth.calls == []


def test_password_only_without_bound_identity_fails():
    req = FakeLoginRequest({"_sid": "x"})
    auth = FakeAuthenticator()

    outcome = handle_login_request(req, _attempt(username=None, password_only=True), auth, _next_url)

    assert isinstance(outcome, LoginFailure)
    assert outcome.error.code is ErrorCode.AUTHENTICATION_REQUIRED
    assert auth.calls == []


def test_directory_error_is_passed_through_unchanged():
    error = ErrorInformation(ErrorCode.DIRECTORY_UNAVAILABLE, "directory down", "ldap timeout")
    req = FakeLoginRequest()
    auth = FakeAuthenticator(failure=error)

    outcome = handle_login_request(req, _attempt(), auth, _next_url)

    assert isinstance(outcome, LoginFailure)
    assert outcome.error is error


def test_failed_attempts_leave_session_untouched():
    req = FakeLoginRequest()
    before = dict(req.session)
    auth = FakeAuthenticator()

    first = handle_login_request(req, _attempt(password="wrong"), auth, _next_url)
    second = handle_login_request(req, _attempt(password="wrong"), auth, _next_url)

    assert first.error.code is second.error.code is ErrorCode.WRONG_PASSWORD
    assert req.session == before
    assert req.renewals == 0
    assert not req.session_state().is_authenticated
