import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from fieldbase.database.supabase_client import get_supabase
from fieldbase.core.dependencies import get_optional_user, require_auth
from fieldbase.core.exceptions import ActionError, AppError, ErrorCode, status_code_for
from fieldbase.core.navigation import DASHBOARD_PATH, SIGNUP_PATH
from fieldbase.core.responses import ActionResult, failure, success
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.invitations.schemas import (
    AcceptedInvitationResponse, InvitationAccept, InvitationCreate, InvitationListResponse,
    InvitationResponse
)
from fieldbase.modules.invitations.service import InvitationService
from supabase import Client
from typing import Optional
from uuid import UUID

logger = logging.getLogger(__name__)

router = APIRouter(tags=["invitations"])

# Mounted without the /api/v1 prefix: this is the link sent to invitees
landing_router = APIRouter(tags=["invitations"])

INVITATION_ERROR_PATH = "/invitations/error"

INVITATION_ERROR_MESSAGES = {
    ErrorCode.NOT_FOUND: "This invitation does not exist or was already used.",
    ErrorCode.VALIDATION_ERROR: "This invitation has expired or you already belong to the workspace.",
    ErrorCode.AUTHORIZATION_ERROR: "This invitation was sent to another email address.",
}


def get_invitation_service(supabase: Client = Depends(get_supabase)) -> InvitationService:
    return InvitationService(supabase)


@router.post(
    "/workspaces/{workspace_id}/invitations",
    response_model=ActionResult[InvitationResponse],
    status_code=201
)
async def invite_user(
    workspace_id: UUID,
    invitation_data: InvitationCreate,
    current_user: CurrentUser = Depends(require_auth),
    service: InvitationService = Depends(get_invitation_service)
):
    """Invite an email to the workspace (owner/admin only)"""
    return success(service.invite(str(workspace_id), invitation_data, current_user))


@router.get("/workspaces/{workspace_id}/invitations", response_model=ActionResult[InvitationListResponse])
async def list_invitations(
    workspace_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: InvitationService = Depends(get_invitation_service)
):
    """List pending and accepted invitations, newest first (owner/admin only)"""
    invitations = service.list_invitations(str(workspace_id), current_user)
    return success(InvitationListResponse(invitations=invitations))


@router.post("/invitations/accept", response_model=ActionResult[AcceptedInvitationResponse])
async def accept_invitation(
    accept_data: InvitationAccept,
    current_user: CurrentUser = Depends(require_auth),
    service: InvitationService = Depends(get_invitation_service)
):
    """Accept an invitation addressed to the current user's email"""
    membership = service.accept_invitation(accept_data.token, current_user)
    return success(AcceptedInvitationResponse(
        organization_id=membership.organization_id,
        role=membership.role,
    ))


@router.delete("/invitations/{invitation_id}", response_model=ActionResult[None])
async def revoke_invitation(
    invitation_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: InvitationService = Depends(get_invitation_service)
):
    """Revoke (delete) an invitation (owner/admin only)"""
    service.revoke_invitation(str(invitation_id), current_user)
    return success(None)


def _error_redirect(error: AppError) -> RedirectResponse:
    return RedirectResponse(
        f"{INVITATION_ERROR_PATH}?{urlencode({'reason': error.code.value})}",
        status_code=303
    )


# Registered before /invitations/{token} so "error" is never taken for a token
@landing_router.get(INVITATION_ERROR_PATH, include_in_schema=False)
async def invitation_error(reason: ErrorCode = ErrorCode.UNKNOWN_ERROR):
    error = ActionError(
        code=reason,
        message=INVITATION_ERROR_MESSAGES.get(reason, "This invitation could not be used."),
    )
    return JSONResponse(status_code=status_code_for(error), content=failure(error))


@landing_router.get("/invitations/{token}", include_in_schema=False)
async def invitation_landing(
    token: str,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    service: InvitationService = Depends(get_invitation_service)
):
    """
    Invitation link target.

    Anonymous visitors are sent to sign-up with the email and token carried
    along, so the invitation is accepted right after the account exists.
    Signed-in visitors accept immediately.
    """
    if current_user is None:
        try:
            email = service.get_invitation_email(token)
        except AppError as e:
            return _error_redirect(e)
        return RedirectResponse(
            f"{SIGNUP_PATH}?{urlencode({'email': email, 'token': token})}",
            status_code=303
        )

    try:
        service.accept_invitation(token, current_user)
    except AppError as e:
        logger.info(f"Invitation link rejected for {current_user.id}: {e.message}")
        return _error_redirect(e)
    return RedirectResponse(DASHBOARD_PATH, status_code=303)
