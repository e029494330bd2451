"""
Template rendering
Jinja2 pages with a fresh CSRF token for every rendered form
"""

import os
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.config import settings
from app.utils.csrf import csrf_guard

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "..", "templates")

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.globals.update({
    "app_name": settings.app_name,
    "current_year": datetime.now().year,
})


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
    with_csrf: bool = True
):
    """
    Render a page

    When ``with_csrf`` is set a new token is issued: it is exposed to the
    template as ``csrf_token`` and its cookie is attached to the response.
    """
    context = dict(context or {})
    directive = None
    if with_csrf:
        token, directive = csrf_guard.issue_token()
        context["csrf_token"] = token
        context["csrf_field_name"] = csrf_guard.form_field

    response = templates.TemplateResponse(request, name, context, status_code=status_code)
    if directive is not None:
        directive.apply(response)
    return response
