"""
Authentication Routes
Login, signup, logout and the generic error page
"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from app.services.auth_service import AuthService
from app.utils.csrf import require_csrf
from app.utils.dependencies import OptionalUser
from app.utils.session import set_session_cookies, clear_session_cookies
from app.utils.templating import render
from shared.schemas import LoginSchema, SignupSchema, validate_form_data, FORM_ERROR_KEY

logger = logging.getLogger(__name__)

router = APIRouter()

DASHBOARD_URL = "/secure/dashboard"
LOGIN_URL = "/auth/login"
ERROR_URL = "/auth/error"

LOGIN_NOTICES = {
    "registered": "Account created. Please check your email to confirm your address before signing in.",
    "deleted": "Your account has been deleted.",
}


def _login_notice(request: Request):
    for key, text in LOGIN_NOTICES.items():
        if request.query_params.get(key):
            return text
    return None


@router.get("/login")
async def login_page(request: Request, user: OptionalUser):
    """Render the login form"""
    if user:
        return RedirectResponse(DASHBOARD_URL, status_code=303)
    return render(request, "auth/login.html", {"notice": _login_notice(request)})


@router.post("/login", dependencies=[Depends(require_csrf)])
async def login(request: Request):
    """
    Sign the user in

    Re-renders the form with field errors when validation or authentication fails
    """
    form = await request.form()
    login_data, errors = validate_form_data(LoginSchema, form)

    if errors:
        return render(request, "auth/login.html", {
            "errors": errors,
            "email": form.get("email", "")
        }, status_code=400)

    result = await AuthService.login(login_data.email, login_data.password)
    if not result['success']:
        return render(request, "auth/login.html", {
            "errors": {FORM_ERROR_KEY: result['error']},
            "email": login_data.email
        }, status_code=401)

    response = RedirectResponse(DASHBOARD_URL, status_code=303)
    set_session_cookies(response, result['session'])
    return response


@router.get("/signup")
async def signup_page(request: Request, user: OptionalUser):
    """Render the signup form"""
    if user:
        return RedirectResponse(DASHBOARD_URL, status_code=303)
    return render(request, "auth/signup.html")


@router.post("/signup", dependencies=[Depends(require_csrf)])
async def signup(request: Request):
    """
    Register a new user

    Creates the auth user and the matching profile row
    """
    form = await request.form()
    signup_data, errors = validate_form_data(SignupSchema, form)

    if errors:
        return render(request, "auth/signup.html", {
            "errors": errors,
            "form": {
                "email": form.get("email", ""),
                "first_name": form.get("first_name", ""),
                "last_name": form.get("last_name", "")
            }
        }, status_code=400)

    result = await AuthService.signup(signup_data)
    if not result['success']:
        return RedirectResponse(ERROR_URL, status_code=303)

    if not result.get('session'):
        return RedirectResponse(f"{LOGIN_URL}?registered=1", status_code=303)

    response = RedirectResponse(DASHBOARD_URL, status_code=303)
    set_session_cookies(response, result['session'])
    return response


@router.post("/logout", dependencies=[Depends(require_csrf)])
async def logout(request: Request, user: OptionalUser):
    """Sign the user out and drop the session cookies"""
    if user:
        await AuthService.logout(user)

    response = RedirectResponse(LOGIN_URL, status_code=303)
    clear_session_cookies(request, response)
    return response


@router.get("/error")
async def error_page(request: Request):
    """Generic error page for rejected or failed requests"""
    return render(request, "error.html", {
        "detail": "Sorry, something went wrong. Please go back and try again."
    }, with_csrf=False)
