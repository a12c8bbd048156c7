from fastapi import APIRouter, Depends
from fieldbase.database.supabase_client import get_supabase
from fieldbase.config.palette import get_palette
from fieldbase.core.dependencies import require_auth
from fieldbase.core.responses import ActionResult, success
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectWithTablesResponse
)
from fieldbase.modules.projects.service import ProjectService
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.post("", response_model=ActionResult[ProjectResponse], status_code=201)
async def create_project(
    project_data: ProjectCreate,
    current_user: CurrentUser = Depends(require_auth),
    service: ProjectService = Depends(get_project_service)
):
    """Create a new project (requires workspace membership)"""
    return success(service.create_project(project_data, current_user))


@router.get("/colors", response_model=ActionResult[List[dict]])
async def list_project_colors():
    """Colors a project can take, with their hex values"""
    return success(get_palette())


@router.get("/{project_id}", response_model=ActionResult[ProjectWithTablesResponse])
async def get_project(
    project_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: ProjectService = Depends(get_project_service)
):
    """Get project with its tables"""
    return success(service.get_project(str(project_id), current_user))


@router.patch("/{project_id}", response_model=ActionResult[ProjectResponse])
async def update_project(
    project_id: UUID,
    project_data: ProjectUpdate,
    current_user: CurrentUser = Depends(require_auth),
    service: ProjectService = Depends(get_project_service)
):
    """Update name, description or color of a project"""
    return success(service.update_project(str(project_id), project_data, current_user))


@router.delete("/{project_id}", response_model=ActionResult[None])
async def delete_project(
    project_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: ProjectService = Depends(get_project_service)
):
    """Delete project and, by cascade, its tables"""
    service.delete_project(str(project_id), current_user)
    return success(None)
