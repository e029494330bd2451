"""
FastAPI Dependencies
Session-based authentication for the secure pages
"""

import logging
from typing import Annotated, Optional
from fastapi import Depends, Request

from app.utils.session import read_session_tokens
from app.utils.supabase_client import supabase_client

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """Raised when a secure page is requested without a usable session"""


async def get_current_user(request: Request) -> dict:
    """
    Get current authenticated user from the session cookies

    A rejected access token is retried once through the refresh token; the new
    session is left on ``request.state.refreshed_session`` for the middleware
    to write back as cookies.

    Raises:
        LoginRequired: If no user can be resolved
    """
    tokens = read_session_tokens(request)
    access_token = tokens["access_token"]
    refresh_token = tokens["refresh_token"]

    if not access_token and not refresh_token:
        raise LoginRequired()

    user = await supabase_client.get_user(access_token) if access_token else None

    if user is None and refresh_token:
        refresh_result = await supabase_client.refresh_session(refresh_token)
        if refresh_result["success"] and refresh_result.get("user"):
            session = refresh_result["session"]
            request.state.refreshed_session = session
            user = refresh_result["user"]
            access_token = session["access_token"]
            refresh_token = session["refresh_token"]
            logger.info(f"Session refreshed for user {user['id']}")

    if user is None:
        raise LoginRequired()

    return {
        **user,
        "access_token": access_token,
        "refresh_token": refresh_token
    }


async def get_optional_user(request: Request) -> Optional[dict]:
    """Get the current user for pages that work with or without a session"""
    try:
        return await get_current_user(request)
    except LoginRequired:
        return None


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[dict, Depends(get_current_user)]
OptionalUser = Annotated[Optional[dict], Depends(get_optional_user)]
