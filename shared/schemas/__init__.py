"""
Shared data schemas for Task Desk

This package contains the form and record schemas used by the web service.
"""

from .user import (
    LoginSchema, SignupSchema, ProfileUpdateSchema, EmailChangeSchema,
    PasswordChangeSchema, AccountDeletionSchema, ProfileSchema,
    DELETE_CONFIRMATION_TEXT
)
from .task import TaskSchema, TaskCreateSchema, TaskUpdateSchema, TaskStatus, TaskPriority
from .validation import validate_form_data, FORM_ERROR_KEY

__all__ = [
    "LoginSchema",
    "SignupSchema",
    "ProfileUpdateSchema",
    "EmailChangeSchema",
    "PasswordChangeSchema",
    "AccountDeletionSchema",
    "ProfileSchema",
    "DELETE_CONFIRMATION_TEXT",
    "TaskSchema",
    "TaskCreateSchema",
    "TaskUpdateSchema",
    "TaskStatus",
    "TaskPriority",
    "validate_form_data",
    "FORM_ERROR_KEY",
]

__version__ = "1.0.0"
