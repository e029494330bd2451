"""
Shared utilities for Task Desk

This package contains the logging setup and the CSRF guard.
"""

from .logger import setup_logging, get_audit_logger, get_request_logger
from .security import CsrfGuard, CsrfConfig, CookieDirective, CsrfFailure

__all__ = [
    "setup_logging",
    "get_audit_logger",
    "get_request_logger",
    "CsrfGuard",
    "CsrfConfig",
    "CookieDirective",
    "CsrfFailure",
]

__version__ = "1.0.0"
