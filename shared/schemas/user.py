"""
User data schemas for Task Desk

Pydantic models validating the raw auth and profile forms before anything is
sent to the backend.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from email_validator import validate_email, EmailNotValidError

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100
NAME_MAX_LENGTH = 50
DELETE_CONFIRMATION_TEXT = "DELETE MY ACCOUNT"


def _clean_email(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Email is required")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Invalid email format")
    return value.lower()


def _check_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(value) > PASSWORD_MAX_LENGTH:
        raise ValueError("Password is too long")
    return value


def _clean_name(value: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{label} is required")
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f"{label} must be at most {NAME_MAX_LENGTH} characters")
    return value


class LoginSchema(BaseModel):
    """Schema for user login"""
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _clean_email(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class SignupSchema(BaseModel):
    """Schema for creating a new user"""
    email: str
    password: str
    first_name: str
    last_name: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _clean_email(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)

    @field_validator('first_name')
    @classmethod
    def validate_first_name(cls, v):
        return _clean_name(v, "First name")

    @field_validator('last_name')
    @classmethod
    def validate_last_name(cls, v):
        return _clean_name(v, "Last name")


class ProfileUpdateSchema(BaseModel):
    """Schema for updating profile names"""
    first_name: str
    last_name: str

    @field_validator('first_name')
    @classmethod
    def validate_first_name(cls, v):
        return _clean_name(v, "First name")

    @field_validator('last_name')
    @classmethod
    def validate_last_name(cls, v):
        return _clean_name(v, "Last name")


class EmailChangeSchema(BaseModel):
    """Schema for email change"""
    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _clean_email(v)


class PasswordChangeSchema(BaseModel):
    """Schema for password change"""
    current_password: str
    new_password: str

    @model_validator(mode='after')
    def validate_passwords(self):
        if not self.current_password or not self.new_password:
            raise ValueError('Both current and new password are required')
        if len(self.new_password) < PASSWORD_MIN_LENGTH:
            raise ValueError(f'New password must be at least {PASSWORD_MIN_LENGTH} characters long')
        if len(self.new_password) > PASSWORD_MAX_LENGTH:
            raise ValueError('Password is too long')
        return self


class AccountDeletionSchema(BaseModel):
    """Schema for account deletion confirmation"""
    password: str
    confirmation_text: str

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError('Password is required')
        return v

    @field_validator('confirmation_text')
    @classmethod
    def validate_confirmation(cls, v):
        if (v or '').strip() != DELETE_CONFIRMATION_TEXT:
            raise ValueError(f'Please type "{DELETE_CONFIRMATION_TEXT}" to confirm')
        return v.strip()


class ProfileSchema(BaseModel):
    """Row of the profiles table"""
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
