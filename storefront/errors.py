"""
Storefront errors.

Message constants are centralized here to avoid string duplication across
routers; exception classes carry them from services to the HTTP layer.
"""

# Auth errors
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_NOT_SIGNED_IN = "You must sign in"
ERROR_ADMIN_REQUIRED = "Admin access required"
ERROR_INVALID_CREDENTIALS = "Invalid email or password"
ERROR_EMAIL_REGISTERED = "This email is already registered"
ERROR_AUTH_FAILED = "Authentication failed. Please try again."

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_PRODUCT_OUT_OF_STOCK = "Product out of stock"

# Generic errors
ERROR_INTERNAL = "Internal server error"


class StorefrontError(Exception):
    """Base class for expected application errors."""

    status_code = 500
    default_message = ERROR_INTERNAL

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(StorefrontError):
    status_code = 401
    default_message = ERROR_UNAUTHORIZED


class InvalidCredentialsError(AuthError):
    default_message = ERROR_INVALID_CREDENTIALS


class EmailAlreadyRegisteredError(AuthError):
    status_code = 409
    default_message = ERROR_EMAIL_REGISTERED


class AuthServiceError(AuthError):
    """Supabase Auth failed for a reason the user cannot fix."""

    status_code = 502
    default_message = ERROR_AUTH_FAILED
