"""Credential validation for sign-in and sign-up forms."""
import re
from typing import Optional

from pydantic import BaseModel, field_validator

# Same shape check browsers apply to <input type="email">
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


class SignInCredentials(BaseModel):
    """Email/password pair."""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip()
        if len(v) > EMAIL_MAX_LENGTH:
            raise ValueError("Email is too long")
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email")
        return v.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(v) > PASSWORD_MAX_LENGTH:
            raise ValueError("Password is too long")
        return v


class SignUpCredentials(SignInCredentials):
    """Sign-up form: credentials plus display name."""
    full_name: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if len(v) < NAME_MIN_LENGTH:
            raise ValueError(f"Name must be at least {NAME_MIN_LENGTH} characters")
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError("Name is too long")
        return v
