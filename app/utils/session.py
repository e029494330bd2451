"""
Session cookies
The backend's access and refresh tokens live in http-only cookies
"""

from typing import Dict, Optional
from starlette.requests import Request

from app.config import settings


def _cookie_kwargs() -> dict:
    return {
        "max_age": settings.session_cookie_max_age,
        "path": "/",
        "secure": settings.is_production,
        "httponly": True,
        "samesite": "lax",
    }


def set_session_cookies(response, session: Dict[str, str]) -> None:
    """Persist backend session tokens on the response"""
    response.set_cookie(settings.access_token_cookie, session["access_token"], **_cookie_kwargs())
    response.set_cookie(settings.refresh_token_cookie, session["refresh_token"], **_cookie_kwargs())


def clear_session_cookies(request: Request, response) -> None:
    """
    Remove backend session tokens from the browser

    Also marks the request so a session refreshed earlier in the same request
    is not written back.
    """
    request.state.session_cleared = True
    for name in (settings.access_token_cookie, settings.refresh_token_cookie):
        response.delete_cookie(name, path="/", secure=settings.is_production, httponly=True, samesite="lax")


def read_session_tokens(request: Request) -> Dict[str, Optional[str]]:
    """Return the access and refresh tokens sent by the browser"""
    return {
        "access_token": request.cookies.get(settings.access_token_cookie),
        "refresh_token": request.cookies.get(settings.refresh_token_cookie),
    }
