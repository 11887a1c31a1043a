"""Authentication package."""
from .dependencies import (
    extract_bearer_token,
    get_auth_service,
    get_current_user,
    require_user,
    verify_admin,
)
from .service import SIGNED_IN, SIGNED_OUT, AuthService, auth_events
from .validators import SignInCredentials, SignUpCredentials

__all__ = [
    "SIGNED_IN",
    "SIGNED_OUT",
    "AuthService",
    "auth_events",
    "SignInCredentials",
    "SignUpCredentials",
    "extract_bearer_token",
    "get_auth_service",
    "get_current_user",
    "require_user",
    "verify_admin",
]
