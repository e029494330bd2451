"""
Security utilities for Task Desk

Provides the CSRF guard used by every form that triggers a mutating action.
"""

import hmac
import time
import hashlib
import secrets
import logging
from enum import Enum
from dataclasses import dataclass, asdict
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_FORM_FIELD = "csrfToken"
CSRF_TOKEN_MAX_AGE = 60 * 60  # 1 hour
CSRF_ENTROPY_BYTES = 32
DEFAULT_CSRF_SECRET = "default-csrf-secret-change-in-production"


class CsrfFailure(str, Enum):
    """Reasons a CSRF verification can fail (internal only)"""
    MISSING_TOKEN = "missing_token"
    MISSING_COOKIE = "missing_cookie"
    MISMATCH = "mismatch"
    COMPARISON_FAULT = "comparison_fault"


@dataclass(frozen=True)
class CsrfConfig:
    """CSRF guard configuration"""
    secret: str
    secure_cookie: bool = False
    max_age: int = CSRF_TOKEN_MAX_AGE
    cookie_name: str = CSRF_COOKIE_NAME
    form_field: str = CSRF_FORM_FIELD

    def uses_default_secret(self) -> bool:
        return self.secret == DEFAULT_CSRF_SECRET


@dataclass(frozen=True)
class CookieDirective:
    """Framework-neutral description of a Set-Cookie instruction"""
    key: str
    value: str
    max_age: int
    path: str = "/"
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def as_kwargs(self) -> dict:
        """Keyword arguments accepted by Starlette's ``Response.set_cookie``"""
        return asdict(self)

    def apply(self, response) -> None:
        """Write the cookie onto a response object exposing ``set_cookie``"""
        response.set_cookie(**self.as_kwargs())


CookieSink = Callable[[CookieDirective], None]
CookieSource = Callable[[str], Optional[str]]


class CsrfGuard:
    """
    Synchronized-token CSRF guard.

    A token is an HMAC-SHA256 over fresh entropy and the issuance time. It is
    handed to the browser twice: in an http-only cookie and in a hidden form
    field. A submission is accepted only when both copies are identical.
    Nothing is stored server-side; validity ends when the cookie expires or is
    overwritten by a newer token.
    """

    def __init__(
        self,
        config: CsrfConfig,
        entropy: Callable[[int], bytes] = secrets.token_bytes,
        clock: Callable[[], float] = time.time,
    ):
        if not config.secret:
            raise ValueError("CSRF secret must not be empty")
        self.config = config
        self._entropy = entropy
        self._clock = clock

    @property
    def cookie_name(self) -> str:
        return self.config.cookie_name

    @property
    def form_field(self) -> str:
        return self.config.form_field

    def _digest(self, random_bytes: bytes, timestamp: str) -> str:
        mac = hmac.new(self.config.secret.encode("utf-8"), digestmod=hashlib.sha256)
        mac.update(random_bytes + timestamp.encode("utf-8"))
        return mac.hexdigest()

    def issue_token(self, cookie_sink: Optional[CookieSink] = None) -> Tuple[str, CookieDirective]:
        """
        Generate a CSRF token

        Args:
            cookie_sink: Optional callable receiving the cookie directive

        Returns:
            tuple: (token, cookie directive to attach to the response)
        """
        random_bytes = self._entropy(CSRF_ENTROPY_BYTES)
        timestamp = str(int(self._clock() * 1000))
        token = self._digest(random_bytes, timestamp)

        directive = CookieDirective(
            key=self.config.cookie_name,
            value=token,
            max_age=self.config.max_age,
            path="/",
            secure=self.config.secure_cookie,
            httponly=True,
            samesite="lax",
        )
        if cookie_sink is not None:
            cookie_sink(directive)

        return token, directive

    def check_token(self, token: Optional[str], cookie_source: CookieSource) -> Optional[CsrfFailure]:
        """
        Check a submitted token against the stored cookie

        Returns:
            None when the token is valid, otherwise the failure reason
        """
        if not token:
            return CsrfFailure.MISSING_TOKEN

        stored_token = cookie_source(self.config.cookie_name)
        if not stored_token:
            return CsrfFailure.MISSING_COOKIE

        try:
            matches = hmac.compare_digest(token.encode("utf-8"), stored_token.encode("utf-8"))
        except Exception as e:
            logger.error(f"CSRF token validation error: {e}")
            return CsrfFailure.COMPARISON_FAULT

        return None if matches else CsrfFailure.MISMATCH

    def verify_token(self, token: Optional[str], cookie_source: CookieSource) -> bool:
        """
        Verify that a CSRF token is valid

        Args:
            token: Token submitted with the form
            cookie_source: Callable returning the stored cookie value by name

        Returns:
            True only when the token matches the cookie exactly
        """
        failure = self.check_token(token, cookie_source)
        if failure is not None:
            logger.warning(f"CSRF verification failed: {failure.value}")
            return False
        return True
