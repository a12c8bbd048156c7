import logging
import re
import unicodedata
from typing import List

from postgrest.exceptions import APIError
from supabase import Client

from fieldbase.core.access import require_workspace_access
from fieldbase.core.exceptions import DatabaseError, UnknownError, is_constraint_violation
from fieldbase.database.supabase_client import rpc_row
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.workspaces.schemas import (
    WorkspaceCreate, WorkspaceResponse, WorkspaceWithRoleResponse, WorkspaceMemberResponse
)

logger = logging.getLogger(__name__)

UNKNOWN_EMAIL = "unknown@example.com"


def generate_slug(text: str) -> str:
    """'Équipe Produit 2' -> 'equipe-produit-2'"""
    normalized = unicodedata.normalize("NFD", text.lower().strip())
    without_accents = "".join(c for c in normalized if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]+", "-", without_accents).strip("-")


class WorkspaceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_workspace(self, workspace_data: WorkspaceCreate, user: CurrentUser) -> WorkspaceResponse:
        """Create an organization with the caller as its owner, atomically"""
        try:
            result = self.supabase.rpc("create_organization_with_owner", {
                "p_name": workspace_data.name,
                "p_slug": workspace_data.slug,
                "p_description": workspace_data.description or None,
                "p_user_id": user.id,
            }).execute()
        except APIError as e:
            if is_constraint_violation(e):
                raise DatabaseError("You already have a workspace with this slug.")
            raise

        organization = rpc_row(result.data)
        if not organization:
            raise UnknownError("Failed to create workspace")

        logger.info(f"Workspace {organization['id']} ({organization['slug']}) created by {user.id}")
        return WorkspaceResponse(**organization)

    def list_my_workspaces(self, user: CurrentUser) -> List[WorkspaceWithRoleResponse]:
        """Workspaces the user is a member of, with the user's role in each"""
        members_result = self.supabase.table("organization_members")\
            .select("organization_id, role")\
            .eq("user_id", user.id)\
            .execute()
        if not members_result.data:
            return []
        roles = {m["organization_id"]: m["role"] for m in members_result.data}

        result = self.supabase.table("organizations")\
            .select("*")\
            .in_("id", list(roles))\
            .order("created_at", desc=True)\
            .execute()
        return [WorkspaceWithRoleResponse(**org, role=roles[org["id"]]) for org in result.data]

    def get_workspace(self, workspace_id: str, user: CurrentUser) -> WorkspaceWithRoleResponse:
        membership = require_workspace_access(self.supabase, user.id, workspace_id)
        result = self.supabase.table("organizations")\
            .select("*")\
            .eq("id", workspace_id)\
            .limit(1)\
            .execute()
        # Membership rows cascade with the organization, so a member always finds it
        return WorkspaceWithRoleResponse(**result.data[0], role=membership.role)

    def list_members(self, workspace_id: str, user: CurrentUser) -> List[WorkspaceMemberResponse]:
        """Members in join order, with their email from profiles"""
        require_workspace_access(self.supabase, user.id, workspace_id)

        members_result = self.supabase.table("organization_members")\
            .select("id, user_id, role, created_at")\
            .eq("organization_id", workspace_id)\
            .order("created_at", desc=False)\
            .execute()
        members = members_result.data or []
        if not members:
            return []

        emails = {}
        try:
            profiles_result = self.supabase.table("profiles")\
                .select("id, email")\
                .in_("id", [m["user_id"] for m in members])\
                .execute()
            emails = {p["id"]: p.get("email") for p in profiles_result.data or []}
        except APIError as e:
            logger.warning(f"Error fetching profiles for workspace {workspace_id}: {e.message}")

        return [
            WorkspaceMemberResponse(
                id=m["user_id"],
                email=emails.get(m["user_id"]) or UNKNOWN_EMAIL,
                role=m["role"],
                joined_at=m["created_at"],
            )
            for m in members
        ]
