"""
Configuration Management
Environment-based settings for Supabase, cookies, CSRF and logging
"""

import logging
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.utils.security import CsrfConfig, DEFAULT_CSRF_SECRET, CSRF_TOKEN_MAX_AGE

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("development", "testing", "production")


class Settings(BaseSettings):
    # App config
    app_name: str = "Task Desk"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_format: Optional[str] = None
    logging_config_path: Optional[str] = None

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # CSRF
    csrf_secret: str = DEFAULT_CSRF_SECRET
    csrf_cookie_max_age: int = CSRF_TOKEN_MAX_AGE

    # Session cookies holding the backend tokens
    access_token_cookie: str = "sb-access-token"
    refresh_token_cookie: str = "sb-refresh-token"
    session_cookie_max_age: int = 60 * 60 * 24 * 7

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        v = (v or "development").lower()
        if v not in ENVIRONMENTS:
            raise ValueError(f"ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}")
        return v

    @field_validator('csrf_cookie_max_age', 'session_cookie_max_age')
    @classmethod
    def validate_max_age(cls, v):
        if v < 1:
            raise ValueError('Cookie max age must be at least 1 second')
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def csrf_config(self) -> CsrfConfig:
        """CSRF guard configuration derived from these settings"""
        return CsrfConfig(
            secret=self.csrf_secret,
            secure_cookie=self.is_production,
            max_age=self.csrf_cookie_max_age,
        )

    def log_config(self):
        """Log configuration (without sensitive data)"""
        logger.info(f"Environment: {self.environment}")
        logger.info(f"Supabase URL: {self.supabase_url or 'not configured'}")
        logger.info(f"Service role key: {'Yes' if self.supabase_service_role_key else 'No'}")
        logger.info(f"Secure cookies: {self.is_production}")


def validate_configuration(config: Settings) -> bool:
    """Validate settings before the application starts serving"""
    config.log_config()

    if config.is_production and config.csrf_secret == DEFAULT_CSRF_SECRET:
        raise ValueError(
            "CSRF_SECRET must be set in production. "
            "The built-in default secret is for local development only."
        )

    if not config.supabase_configured:
        logger.warning("Supabase credentials not found in environment")
    elif not config.supabase_service_role_key:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY not set - account deletion is unavailable")

    logger.info("Configuration validation completed")
    return True


settings = Settings()
