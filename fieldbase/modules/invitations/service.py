import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from postgrest.exceptions import APIError
from supabase import Client

from fieldbase.config import settings
from fieldbase.core.access import Membership, get_membership, require_workspace_role
from fieldbase.core.exceptions import (
    DatabaseError, NotFoundError, UnknownError, ValidationError, WorkspaceAccessError,
    is_constraint_violation
)
from fieldbase.database.supabase_client import rpc_row
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.invitations.schemas import InvitationCreate, InvitationResponse

logger = logging.getLogger(__name__)

# raised by accept_workspace_invitation: no pending, unexpired row for the token
NO_DATA_FOUND = "P0002"
# raised by accept_workspace_invitation: invitee email differs from the user's
EMAIL_MISMATCH = "28000"


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def invitation_link(token: str) -> str:
    return f"{settings.app_base_url.rstrip('/')}/invitations/{token}"


def is_expired(invitation: InvitationResponse, now: Optional[datetime] = None) -> bool:
    if invitation.expires_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    expires_at = invitation.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at < now


class InvitationService:
    """
    Invitation lifecycle: pending -> accepted, or pending -> deleted (revoked).
    Expiry is evaluated when the token is used; expired rows are never rewritten.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find_by_token(self, token: str) -> Optional[InvitationResponse]:
        result = self.supabase.table("workspace_invitations")\
            .select("*")\
            .eq("token", token)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return InvitationResponse(**result.data[0])

    def _has_pending_invitation(self, workspace_id: str, email: str) -> bool:
        result = self.supabase.table("workspace_invitations")\
            .select("id")\
            .eq("organization_id", workspace_id)\
            .eq("email", email)\
            .is_("accepted_at", "null")\
            .limit(1)\
            .execute()
        return bool(result.data)

    def invite(self, workspace_id: str, invitation_data: InvitationCreate, user: CurrentUser) -> InvitationResponse:
        """Create a single-use invitation (owner/admin only)"""
        require_workspace_role(self.supabase, user.id, workspace_id)

        email = invitation_data.email.lower()
        if self._has_pending_invitation(workspace_id, email):
            raise ValidationError("An invitation is already pending for this email.")

        token = generate_token()
        expires_at = datetime.now(timezone.utc) + timedelta(days=settings.invitation_ttl_days)

        result = self.supabase.table("workspace_invitations").insert({
            "organization_id": workspace_id,
            "email": email,
            "token": token,
            "role": invitation_data.role,
            "created_by_user_id": user.id,
            "expires_at": expires_at.isoformat(),
        }).execute()

        if not result.data:
            raise UnknownError("Failed to create invitation.")

        # Delivery is handled outside this service; the link is what gets sent
        logger.info(f"Invitation created for {email} in workspace {workspace_id}: {invitation_link(token)}")
        return InvitationResponse(**result.data[0])

    def get_invitation_email(self, token: str) -> str:
        """Invitee email for a pending token, used to prefill sign-up"""
        invitation = self._find_by_token(token)
        if invitation is None or invitation.accepted_at is not None:
            raise NotFoundError("Invitation")
        return invitation.email

    def accept_invitation(self, token: str, user: CurrentUser) -> Membership:
        """
        Consume a token and join its workspace with the invited role.

        Marking the invitation accepted and inserting the membership happen in
        one transaction (accept_workspace_invitation), so neither is visible
        without the other.
        """
        invitation = self._find_by_token(token)
        if invitation is None:
            raise NotFoundError("Invitation")
        if invitation.accepted_at is not None:
            raise NotFoundError("Invitation", "This invitation was already accepted.")
        if is_expired(invitation):
            raise ValidationError("This invitation has expired.")
        if invitation.email.lower() != (user.email or "").lower():
            raise WorkspaceAccessError("This invitation was sent to another email address.")
        if get_membership(self.supabase, user.id, invitation.organization_id) is not None:
            raise ValidationError("You are already a member of this workspace.")

        try:
            result = self.supabase.rpc("accept_workspace_invitation", {
                "p_token": token,
                "p_user_id": user.id,
            }).execute()
        except APIError as e:
            if e.code == NO_DATA_FOUND:
                raise NotFoundError("Invitation", "This invitation is no longer valid.")
            if e.code == EMAIL_MISMATCH:
                raise WorkspaceAccessError("This invitation was sent to another email address.")
            if is_constraint_violation(e):
                logger.error(f"Accepting invitation {invitation.id} for {user.id} failed: {e.message}")
                raise DatabaseError("Could not add you to the workspace.")
            raise

        row = rpc_row(result.data)
        if not row:
            raise UnknownError("Failed to accept invitation.")

        logger.info(f"User {user.id} joined workspace {invitation.organization_id} as {invitation.role}")
        return Membership(**row)

    def list_invitations(self, workspace_id: str, user: CurrentUser) -> List[InvitationResponse]:
        """All invitations of a workspace, pending and accepted, newest first (owner/admin only)"""
        require_workspace_role(self.supabase, user.id, workspace_id)

        result = self.supabase.table("workspace_invitations")\
            .select("*")\
            .eq("organization_id", workspace_id)\
            .order("created_at", desc=True)\
            .execute()
        return [InvitationResponse(**i) for i in result.data or []]

    def revoke_invitation(self, invitation_id: str, user: CurrentUser) -> None:
        """Hard-delete an invitation (owner/admin of its workspace only)"""
        result = self.supabase.table("workspace_invitations")\
            .select("organization_id")\
            .eq("id", invitation_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFoundError("Invitation")

        require_workspace_role(self.supabase, user.id, result.data[0]["organization_id"])

        self.supabase.table("workspace_invitations")\
            .delete()\
            .eq("id", invitation_id)\
            .execute()
        logger.info(f"Invitation {invitation_id} revoked by {user.id}")
