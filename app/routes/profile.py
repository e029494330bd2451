"""
Profile Routes
Name, email and password changes plus account deletion
"""

import logging
from typing import Dict, Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from app.services.auth_service import AuthService
from app.services.user_service import UserService
from app.utils.csrf import require_csrf
from app.utils.dependencies import CurrentUser
from app.utils.session import clear_session_cookies
from app.utils.templating import render
from shared.schemas import (
    ProfileUpdateSchema, EmailChangeSchema, PasswordChangeSchema,
    AccountDeletionSchema, DELETE_CONFIRMATION_TEXT, validate_form_data, FORM_ERROR_KEY
)

logger = logging.getLogger(__name__)

router = APIRouter()

PROFILE_URL = "/secure/profile"

PROFILE_MESSAGES = {
    "profile_updated": "Profile updated successfully!",
    "email_updated": "Email update initiated. Please check your email to confirm the change.",
    "password_updated": "Password updated successfully",
}


async def _render_profile(
    request: Request,
    user: dict,
    status_code: int = 200,
    section: Optional[str] = None,
    errors: Optional[Dict[str, str]] = None
):
    profile = await UserService.get_profile(user)
    message = PROFILE_MESSAGES.get(request.query_params.get("message", ""))
    return render(request, "secure/profile.html", {
        "user": user,
        "profile": profile,
        "message": message,
        "section": section,
        "errors": errors or {},
        "confirmation_text": DELETE_CONFIRMATION_TEXT
    }, status_code=status_code)


def _redirect_with_message(message_key: str) -> RedirectResponse:
    return RedirectResponse(f"{PROFILE_URL}?message={message_key}", status_code=303)


@router.get("")
async def profile_page(request: Request, user: CurrentUser):
    """Render the profile page"""
    return await _render_profile(request, user)


@router.post("", dependencies=[Depends(require_csrf)])
async def update_profile(request: Request, user: CurrentUser):
    """Update first and last name"""
    form = await request.form()
    profile_data, errors = validate_form_data(ProfileUpdateSchema, form)
    if errors:
        return await _render_profile(request, user, 400, "profile", errors)

    result = await UserService.update_profile(user, profile_data)
    if not result['success']:
        return await _render_profile(request, user, 502, "profile", {FORM_ERROR_KEY: result['error']})

    return _redirect_with_message("profile_updated")


@router.post("/email", dependencies=[Depends(require_csrf)])
async def update_email(request: Request, user: CurrentUser):
    """Start an email address change"""
    form = await request.form()
    email_data, errors = validate_form_data(EmailChangeSchema, form)
    if errors:
        return await _render_profile(request, user, 400, "email", errors)

    result = await AuthService.change_email(user, email_data.email)
    if not result['success']:
        return await _render_profile(request, user, 502, "email", {FORM_ERROR_KEY: result['error']})

    return _redirect_with_message("email_updated")


@router.post("/password", dependencies=[Depends(require_csrf)])
async def update_password(request: Request, user: CurrentUser):
    """Change the password after re-verifying the current one"""
    form = await request.form()
    password_data, errors = validate_form_data(PasswordChangeSchema, form)
    if errors:
        return await _render_profile(request, user, 400, "password", errors)

    result = await AuthService.change_password(
        user, password_data.current_password, password_data.new_password
    )
    if not result['success']:
        return await _render_profile(request, user, 400, "password", {FORM_ERROR_KEY: result['error']})

    return _redirect_with_message("password_updated")


@router.post("/delete", dependencies=[Depends(require_csrf)])
async def delete_account(request: Request, user: CurrentUser):
    """Delete the account, its data and the session"""
    form = await request.form()
    deletion_data, errors = validate_form_data(AccountDeletionSchema, form)
    if errors:
        return await _render_profile(request, user, 400, "delete", errors)

    result = await AuthService.delete_account(user, deletion_data.password)
    if not result['success']:
        return await _render_profile(request, user, 400, "delete", {FORM_ERROR_KEY: result['error']})

    response = RedirectResponse("/auth/login?deleted=1", status_code=303)
    clear_session_cookies(request, response)
    return response
