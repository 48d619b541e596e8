from pathlib import Path

from fastapi import Depends, HTTPException, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from .database import get_db
from .directory import DirectoryAuthenticator
from .login_models import SessionState
from .session_state import read_session_state, store_pre_login_url

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


class LoginRedirect(Exception):
    """Raised by require_login; handled by redirecting to the login page."""


def get_settings(request: Request) -> dict:
    return request.app.state.settings


def get_authenticator(request: Request, db: Session = Depends(get_db)) -> DirectoryAuthenticator:
    return DirectoryAuthenticator(db, request.app.state.login_limiter)


def require_login(request: Request) -> SessionState:
    state = read_session_state(request.session)
    if not state.is_authenticated:
        if request.method == "GET":
            url = request.url.path
            if request.url.query:
                url += "?" + request.url.query
            store_pre_login_url(request.session, url)
            raise LoginRedirect()
        raise HTTPException(status_code=401, detail="Not authenticated")
    return state
