"""
CSRF wiring for the web service

The guard itself lives in ``shared.utils.security``; this module binds it to
the service settings and to Starlette requests.
"""

import logging
from fastapi import Request

from app.config import settings
from shared.utils.security import CsrfGuard
from shared.utils.logger import get_audit_logger

logger = logging.getLogger(__name__)

csrf_guard = CsrfGuard(settings.csrf_config())


class CsrfValidationError(Exception):
    """Raised when a mutating request carries no valid CSRF token"""


async def require_csrf(request: Request) -> None:
    """
    Dependency guarding every form post

    Raises:
        CsrfValidationError: If the submitted token does not match the cookie
    """
    form = await request.form()
    token = form.get(csrf_guard.form_field)

    if not csrf_guard.verify_token(token, request.cookies.get):
        get_audit_logger().log_user_action(
            action="csrf_check",
            resource=request.url.path,
            ip_address=request.client.host if request.client else None,
            success=False
        )
        raise CsrfValidationError(request.url.path)
