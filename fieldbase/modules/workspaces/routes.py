from fastapi import APIRouter, Depends
from fieldbase.database.supabase_client import get_supabase
from fieldbase.core.dependencies import require_auth
from fieldbase.core.responses import ActionResult, success
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.projects.schemas import ProjectResponse, WorkspaceHierarchyResponse
from fieldbase.modules.projects.service import ProjectService
from fieldbase.modules.tables.schemas import TableResponse
from fieldbase.modules.tables.service import TableService
from fieldbase.modules.workspaces.schemas import (
    WorkspaceCreate, WorkspaceResponse, WorkspaceWithRoleResponse, WorkspaceMembersResponse
)
from fieldbase.modules.workspaces.service import WorkspaceService, generate_slug
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


def get_workspace_service(supabase: Client = Depends(get_supabase)) -> WorkspaceService:
    return WorkspaceService(supabase)


@router.post("", response_model=ActionResult[WorkspaceResponse], status_code=201)
async def create_workspace(
    workspace_data: WorkspaceCreate,
    current_user: CurrentUser = Depends(require_auth),
    service: WorkspaceService = Depends(get_workspace_service)
):
    """Create a workspace; the caller becomes its owner"""
    return success(service.create_workspace(workspace_data, current_user))


@router.get("", response_model=ActionResult[List[WorkspaceWithRoleResponse]])
async def list_my_workspaces(
    current_user: CurrentUser = Depends(require_auth),
    service: WorkspaceService = Depends(get_workspace_service)
):
    return success(service.list_my_workspaces(current_user))


@router.get("/slug", response_model=ActionResult[dict])
async def suggest_slug(name: str, current_user: CurrentUser = Depends(require_auth)):
    """Slug suggestion for the onboarding form"""
    return success({"slug": generate_slug(name)})


@router.get("/{workspace_id}", response_model=ActionResult[WorkspaceWithRoleResponse])
async def get_workspace(
    workspace_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: WorkspaceService = Depends(get_workspace_service)
):
    return success(service.get_workspace(str(workspace_id), current_user))


@router.get("/{workspace_id}/members", response_model=ActionResult[WorkspaceMembersResponse])
async def list_members(
    workspace_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: WorkspaceService = Depends(get_workspace_service)
):
    """Members in join order, with their email"""
    members = service.list_members(str(workspace_id), current_user)
    return success(WorkspaceMembersResponse(members=members))


@router.get("/{workspace_id}/hierarchy", response_model=ActionResult[WorkspaceHierarchyResponse])
async def get_workspace_hierarchy(
    workspace_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    supabase: Client = Depends(get_supabase)
):
    """Projects with their tables, plus the tables that belong to no project (sidebar tree)"""
    return success(ProjectService(supabase).get_workspace_hierarchy(str(workspace_id), current_user))


@router.get("/{workspace_id}/projects", response_model=ActionResult[List[ProjectResponse]])
async def list_projects(
    workspace_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    supabase: Client = Depends(get_supabase)
):
    return success(ProjectService(supabase).list_projects(str(workspace_id), current_user))


@router.get("/{workspace_id}/tables", response_model=ActionResult[List[TableResponse]])
async def list_tables(
    workspace_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    supabase: Client = Depends(get_supabase)
):
    return success(TableService(supabase).list_workspace_tables(str(workspace_id), current_user))
