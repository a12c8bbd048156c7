import logging
from datetime import datetime, timezone
from typing import List

from supabase import Client

from fieldbase.core.access import require_project_access, require_workspace_access
from fieldbase.core.exceptions import NotFoundError, UnknownError, ValidationError
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectWithTablesResponse, WorkspaceHierarchyResponse
)
from fieldbase.modules.tables.schemas import TableResponse

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _project_tables(self, project_id: str) -> List[TableResponse]:
        result = self.supabase.table("entity_tables")\
            .select("*")\
            .eq("project_id", project_id)\
            .order("created_at", desc=True)\
            .execute()
        return [TableResponse(**t) for t in result.data or []]

    def create_project(self, project_data: ProjectCreate, user: CurrentUser) -> ProjectResponse:
        """Create a new project in a workspace the user belongs to"""
        workspace_id = str(project_data.workspace_id)
        require_workspace_access(self.supabase, user.id, workspace_id)

        result = self.supabase.table("projects").insert({
            "workspace_id": workspace_id,
            "name": project_data.name,
            "description": project_data.description or None,
            "color": project_data.color,
        }).execute()

        if not result.data:
            raise UnknownError("Failed to create project.")

        return ProjectResponse(**result.data[0])

    def get_project(self, project_id: str, user: CurrentUser) -> ProjectWithTablesResponse:
        """Get project with its tables, newest first"""
        require_project_access(self.supabase, user.id, project_id)

        result = self.supabase.table("projects")\
            .select("*")\
            .eq("id", project_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFoundError("Project")

        return ProjectWithTablesResponse(**result.data[0], tables=self._project_tables(project_id))

    def list_projects(self, workspace_id: str, user: CurrentUser) -> List[ProjectResponse]:
        require_workspace_access(self.supabase, user.id, workspace_id)
        result = self.supabase.table("projects")\
            .select("*")\
            .eq("workspace_id", workspace_id)\
            .order("created_at", desc=True)\
            .execute()
        return [ProjectResponse(**p) for p in result.data or []]

    def update_project(self, project_id: str, project_data: ProjectUpdate, user: CurrentUser) -> ProjectResponse:
        """Apply only the supplied keys"""
        # name and color are NOT NULL; an explicit null for them means "unchanged"
        update_data = {
            key: value for key, value in project_data.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }
        if not update_data:
            raise ValidationError("At least one field must be updated.")

        require_project_access(self.supabase, user.id, project_id)

        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self.supabase.table("projects")\
            .update(update_data)\
            .eq("id", project_id)\
            .execute()

        if not result.data:
            raise NotFoundError("Project")

        return ProjectResponse(**result.data[0])

    def delete_project(self, project_id: str, user: CurrentUser) -> None:
        """Hard delete; tables, fields and records go with it (FK cascade)"""
        require_project_access(self.supabase, user.id, project_id)
        self.supabase.table("projects")\
            .delete()\
            .eq("id", project_id)\
            .execute()
        logger.info(f"Project {project_id} deleted by {user.id}")

    def get_workspace_hierarchy(self, workspace_id: str, user: CurrentUser) -> WorkspaceHierarchyResponse:
        """
        Projects (newest first) with their tables, plus the tables that belong to no project.

        Tables are fetched with one query per project; fine for dashboard-sized
        workspaces. Batching them with a single in_("project_id", ...) query is
        the optimization if workspaces grow to hundreds of projects.
        """
        require_workspace_access(self.supabase, user.id, workspace_id)

        projects_result = self.supabase.table("projects")\
            .select("*")\
            .eq("workspace_id", workspace_id)\
            .order("created_at", desc=True)\
            .execute()

        projects = [
            ProjectWithTablesResponse(**project, tables=self._project_tables(project["id"]))
            for project in projects_result.data or []
        ]

        orphans_result = self.supabase.table("entity_tables")\
            .select("*")\
            .eq("workspace_id", workspace_id)\
            .is_("project_id", "null")\
            .order("created_at", desc=True)\
            .execute()

        return WorkspaceHierarchyResponse(
            projects=projects,
            tables_without_project=[TableResponse(**t) for t in orphans_result.data or []],
        )
