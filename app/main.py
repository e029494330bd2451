"""
Web Service - FastAPI Application
Server-rendered authentication and task list for Task Desk
"""

import os
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings, validate_configuration
from app.routes import auth, health, pages, profile, tasks
from app.utils.csrf import CsrfValidationError
from app.utils.dependencies import LoginRequired
from app.utils.session import set_session_cookies, clear_session_cookies
from app.utils.supabase_client import SupabaseUnavailable
from app.utils.templating import render
from shared.utils.logger import setup_logging, get_request_logger

logger = logging.getLogger(__name__)

STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    setup_logging(
        settings.logging_config_path,
        settings.log_level,
        settings.log_format,
        settings.environment
    )
    logger.info("Web Service starting up...")

    validate_configuration(settings)

    logger.info("Web Service startup complete")

    yield

    logger.info("Web Service shutting down...")


# Create FastAPI application
app = FastAPI(
    title="Task Desk",
    description="Authentication and per-user task list backed by Supabase",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.middleware("http")
async def session_cookie_refresh(request: Request, call_next):
    """Write back session cookies renewed while resolving the current user"""
    response = await call_next(request)

    session = getattr(request.state, "refreshed_session", None)
    if session and not getattr(request.state, "session_cleared", False):
        set_session_cookies(response, session)

    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    start = time.perf_counter()
    response = await call_next(request)

    get_request_logger().log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        response_time=time.perf_counter() - start,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent")
    )
    return response


@app.exception_handler(CsrfValidationError)
async def csrf_exception_handler(request: Request, exc: CsrfValidationError):
    """Refuse the action and show the generic error page"""
    return RedirectResponse("/auth/error", status_code=303)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    """Send anonymous visitors of secure pages to the login form"""
    response = RedirectResponse("/auth/login", status_code=303)
    clear_session_cookies(request, response)
    return response


@app.exception_handler(SupabaseUnavailable)
async def backend_unavailable_handler(request: Request, exc: SupabaseUnavailable):
    """Backend not configured"""
    logger.error(f"Backend unavailable: {exc}")
    return render(request, "error.html", {
        "status_code": 503,
        "detail": "The service is temporarily unavailable"
    }, status_code=503, with_csrf=False)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Custom HTTP exception handler rendering an HTML page"""
    return render(request, "error.html", {
        "status_code": exc.status_code,
        "detail": exc.detail
    }, status_code=exc.status_code, with_csrf=False)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True
    )
    return render(request, "error.html", {
        "status_code": 500,
        "detail": "An unexpected error occurred"
    }, status_code=500, with_csrf=False)


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(pages.router, tags=["Pages"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(profile.router, prefix="/secure/profile", tags=["Profile"])
app.include_router(tasks.router, prefix="/secure/tasks", tags=["Tasks"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
