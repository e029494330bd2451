"""
Logging utilities for Task Desk

Logging is configured from ``shared/configs/logging.yml`` (or a file given in
the settings) through ``logging.config.dictConfig``. Each environment may carry
its own section of handler and logger overrides.
"""

import os
import copy
import logging
import logging.config
from pathlib import Path
from typing import Optional, Dict, Any
import yaml

SHARED_LOGGING_CONFIG = Path(__file__).parent.parent / "configs" / "logging.yml"
ENVIRONMENT_SECTIONS = ('development', 'testing', 'production')

# Used only when no YAML configuration can be read
FALLBACK_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'default'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console']
    }
}


def _read_yaml(path) -> Optional[Dict[str, Any]]:
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or None
    except (OSError, yaml.YAMLError) as e:
        print(f"Failed to load logging config from {path}: {e}")
        return None


def load_logging_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a logging configuration dict

    ``config_path`` is tried first, then the shared YAML file; the built-in
    fallback is returned when neither can be read.
    """
    for candidate in (config_path, SHARED_LOGGING_CONFIG):
        if candidate and os.path.exists(candidate):
            config = _read_yaml(candidate)
            if config:
                return config

    return copy.deepcopy(FALLBACK_LOGGING_CONFIG)


def _merge_environment(config: Dict[str, Any], environment: str) -> None:
    sections = {name: config.pop(name, None) for name in ENVIRONMENT_SECTIONS}
    overrides = sections.get(environment) or {}
    for key in ('handlers', 'loggers'):
        if key in overrides:
            config.setdefault(key, {}).update(overrides[key])


def _apply_overrides(config: Dict[str, Any], log_level: Optional[str], log_format: Optional[str]) -> None:
    if log_level:
        level = log_level.upper()
        targets = list(config.get('loggers', {}).values()) + list(config.get('handlers', {}).values())
        if 'root' in config:
            targets.append(config['root'])
        for target in targets:
            target['level'] = level

    if log_format and log_format in config.get('formatters', {}):
        for handler in config.get('handlers', {}).values():
            handler['formatter'] = log_format


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    environment: Optional[str] = None
) -> Dict[str, Any]:
    """
    Configure logging for the service

    Args:
        config_path: Path to a YAML logging configuration file
        log_level: Level forced on every logger and handler
        log_format: Formatter name forced on every handler
        environment: Environment whose overrides are merged in

    Returns:
        The configuration that was applied
    """
    config = load_logging_config(config_path)
    _merge_environment(config, environment or os.getenv('ENVIRONMENT', 'development'))
    _apply_overrides(config, log_level, log_format)

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        print(f"Failed to configure logging: {e}")
        logging.basicConfig(level=(log_level or 'INFO').upper())

    return config


class RequestLogger:
    """One line per served HTTP request"""

    def __init__(self, name: str = "taskdesk.requests"):
        self.logger = logging.getLogger(name)

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        response_time: float,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ):
        self.logger.info(
            f"{method} {path} {status_code} {response_time:.3f}s",
            extra={
                'event': 'http_request',
                'method': method,
                'path': path,
                'status': status_code,
                'duration': response_time,
                'client_ip': ip_address,
                'client_agent': user_agent
            }
        )


class AuditLogger:
    """Trail of security-relevant account actions"""

    def __init__(self, name: str = "taskdesk.audit"):
        self.logger = logging.getLogger(name)

    def log_user_action(
        self,
        action: str,
        user_id: Optional[str] = None,
        resource: str = "account",
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        success: bool = True
    ):
        """
        Record an account action

        Failed actions are logged at warning level so they stand out.
        """
        outcome = "succeeded" if success else "failed"
        level = logging.INFO if success else logging.WARNING
        self.logger.log(
            level,
            f"User {user_id or 'anonymous'} {action} on {resource} {outcome}",
            extra={
                'event': 'audit',
                'actor': user_id,
                'action': action,
                'resource': resource,
                'target_id': resource_id,
                'outcome': outcome,
                'context': details or {},
                'client_ip': ip_address
            }
        )


def get_request_logger() -> RequestLogger:
    return RequestLogger()


def get_audit_logger() -> AuditLogger:
    return AuditLogger()
