import logging
import time
from typing import Callable, Optional

from supabase import Client

from fieldbase.config import settings
from fieldbase.database.supabase_client import SupabaseClient
from fieldbase.core.exceptions import AppError, AuthenticationError, UnknownError, ValidationError
from fieldbase.modules.auth.schemas import (
    CurrentUser, LoginRequest, RegisterRequest, RegisterResponse, TokenResponse
)

logger = logging.getLogger(__name__)


def poll_until(condition: Callable[[], bool], max_attempts: int = 10, delay_ms: int = 500) -> bool:
    """Call condition until it returns True; sleeps delay_ms between attempts, never after the last"""
    for attempt in range(max_attempts):
        if condition():
            return True
        if attempt < max_attempts - 1:
            time.sleep(delay_ms / 1000)
    return False


class AuthService:
    def __init__(self, supabase: Client, session_factory: Optional[Callable[[], Client]] = None):
        self.supabase = supabase
        # sign-up and sign-in never run on the shared client
        self.session_factory = session_factory or SupabaseClient.new_session_client

    def _profile_exists(self, user_id: str) -> bool:
        result = self.supabase.table("profiles")\
            .select("id")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user, sign them in, and accept a pending invitation if a token was given"""
        try:
            auth_response = self.session_factory().auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {"full_name": register_data.full_name}
                }
            })
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise ValidationError(
                    "This email is already in use. Log in to your account or use another email."
                )
            raise UnknownError(f"Registration failed: {error_message}")

        if not auth_response.user:
            raise UnknownError("Failed to create the account")

        user_id = auth_response.user.id
        email = auth_response.user.email or register_data.email

        profile_created = poll_until(
            lambda: self._profile_exists(user_id),
            settings.profile_poll_attempts,
            settings.profile_poll_delay_ms,
        )
        if not profile_created:
            logger.warning(f"Profile for user {user_id} not created after polling, continuing anyway")

        try:
            token = self.login(LoginRequest(email=register_data.email, password=register_data.password))
        except AppError as e:
            logger.error(f"Auto-login after sign-up failed for {user_id}: {e.message}")
            return RegisterResponse(
                user_id=user_id,
                email=email,
                message="Account created. Log in now with your credentials."
            )

        joined_organization_id = None
        if register_data.invitation_token:
            joined_organization_id = self._accept_invitation_after_sign_up(
                register_data.invitation_token,
                CurrentUser(id=user_id, email=email, full_name=register_data.full_name),
            )

        return RegisterResponse(
            user_id=user_id,
            email=email,
            message="User registered successfully",
            access_token=token.access_token,
            joined_organization_id=joined_organization_id,
        )

    def _accept_invitation_after_sign_up(self, token: str, user: CurrentUser) -> Optional[str]:
        """Sign-up must not fail because of the invitation; problems are only logged"""
        from fieldbase.modules.invitations.service import InvitationService

        try:
            membership = InvitationService(self.supabase).accept_invitation(token, user)
        except AppError as e:
            logger.warning(f"Invitation not accepted during sign-up of {user.id}: {e.message}")
            return None
        logger.info(f"Invitation accepted during sign-up, user {user.id} joined {membership.organization_id}")
        return membership.organization_id

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.session_factory().auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise AuthenticationError("Invalid email or password")
            raise UnknownError(f"Login failed: {error_message}")

        if not auth_response.user or not auth_response.session:
            raise AuthenticationError("Invalid email or password")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def get_current_user(self, token: str) -> CurrentUser:
        """Resolve the session identity behind a JWT"""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.debug(f"Token rejected by auth provider: {e}")
            raise AuthenticationError("Invalid or expired token")
        if not user_response or not user_response.user:
            raise AuthenticationError("Invalid or expired token")
        user = user_response.user
        metadata = user.user_metadata or {}
        return CurrentUser(id=user.id, email=user.email or "", full_name=metadata.get("full_name"))

    def has_organization(self, user_id: str) -> bool:
        result = self.supabase.table("organization_members")\
            .select("organization_id")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def logout(self, token: str) -> bool:
        """Revoke the refresh tokens of the session behind token"""
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")
            return False
