"""
Supabase Auth wrapper.

All user-facing failures map to generic messages so responses never reveal
whether an email exists or why the backend refused a request.
"""
from typing import Any, Optional

from supabase import AuthApiError, AuthError as SupabaseAuthError
from supabase._async.client import AsyncClient

from storefront.errors import (
    AuthServiceError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
)
from storefront.events import EventHub
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.database import Database
from storefront.services.models import AuthSession, SessionUser
from .validators import SignInCredentials, SignUpCredentials

logger = get_logger(__name__)

SIGNED_IN = "signed_in"
SIGNED_OUT = "signed_out"

# Process-wide auth state notifications; subscribe() returns the handle
auth_events = EventHub()


class AuthService:
    """Sign-up, sign-in, sign-out and token lookup against Supabase Auth."""

    def __init__(self, client: AsyncClient, db: Database, events: EventHub = auth_events):
        self.client = client
        self.db = db
        self.events = events

    async def _to_session_user(self, user: Any) -> SessionUser:
        metadata = getattr(user, "user_metadata", None) or {}
        return SessionUser(
            id=str(user.id),
            email=getattr(user, "email", None),
            full_name=metadata.get("full_name"),
            is_admin=await self.db.is_admin(str(user.id)),
        )

    async def _to_auth_session(self, response: Any) -> AuthSession:
        session = getattr(response, "session", None)
        return AuthSession(
            access_token=getattr(session, "access_token", None),
            refresh_token=getattr(session, "refresh_token", None),
            expires_at=getattr(session, "expires_at", None),
            user=await self._to_session_user(response.user),
        )

    async def sign_up(self, credentials: SignUpCredentials) -> AuthSession:
        """Create an account. The session is empty when email confirmation is required."""
        try:
            response = await self.client.auth.sign_up({
                "email": credentials.email,
                "password": credentials.password,
                "options": {"data": {"full_name": credentials.full_name}},
            })
        except SupabaseAuthError as e:
            if "already registered" in str(e).lower():
                raise EmailAlreadyRegisteredError() from e
            logger.warning(f"Sign-up failed: {e}")
            raise AuthServiceError() from e

        if response.user is None:
            raise AuthServiceError()

        auth_session = await self._to_auth_session(response)
        if auth_session.access_token:
            await self.events.publish(SIGNED_IN, auth_session.user)
        return auth_session

    async def sign_in(self, credentials: SignInCredentials) -> AuthSession:
        """Password sign-in."""
        try:
            response = await self.client.auth.sign_in_with_password({
                "email": credentials.email,
                "password": credentials.password,
            })
        except AuthApiError as e:
            if "invalid login credentials" in str(e).lower():
                raise InvalidCredentialsError() from e
            logger.warning(f"Sign-in failed: {e}")
            raise AuthServiceError() from e
        except SupabaseAuthError as e:
            logger.warning(f"Sign-in failed: {e}")
            raise AuthServiceError() from e

        auth_session = await self._to_auth_session(response)
        logger.info(f"User {sanitize_id_for_logging(auth_session.user.id)} signed in")
        await self.events.publish(SIGNED_IN, auth_session.user)
        return auth_session

    async def sign_out(self, access_token: str) -> None:
        """Revoke the refresh tokens behind an access token."""
        try:
            await self.client.auth.admin.sign_out(access_token)
        except SupabaseAuthError as e:
            # An already expired token is as good as signed out
            logger.warning(f"Sign-out failed: {e}")
        await self.events.publish(SIGNED_OUT, None)

    async def get_session_user(self, access_token: str) -> Optional[SessionUser]:
        """Resolve an access token to a user, or None if it is not valid."""
        try:
            response = await self.client.auth.get_user(access_token)
        except SupabaseAuthError:
            return None
        if response is None or response.user is None:
            return None
        return await self._to_session_user(response.user)
