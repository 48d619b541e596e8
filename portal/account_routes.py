from fastapi import Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from Security.metrics import render_latest

from .app_context import require_login, templates
from .login_models import SessionState


def register_account_routes(app):
    @app.get("/")
    def root_redirect():
        return RedirectResponse("/account", status_code=303)

    @app.get("/account", response_class=HTMLResponse)
    async def account_page(request: Request, state: SessionState = Depends(require_login)):
        return templates.TemplateResponse(
            request=request,
            name="account.html",
            context={"identity": state.identity, "authentication_type": state.authentication_type.value},
        )

    @app.get("/metrics")
    def metrics():
        payload, content_type = render_latest()
        return Response(content=payload, media_type=content_type)
