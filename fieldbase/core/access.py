"""
Workspace authorization gate.

Every resource-scoped operation resolves the owning workspace id of the
resource (project, table, field, record, invitation) and then calls
require_workspace_access. Only invitation management additionally requires
an owner/admin role.
"""

from typing import Dict, Iterable, Optional

from pydantic import BaseModel
from supabase import Client

from fieldbase.core.exceptions import NotFoundError, WorkspaceAccessError

ADMIN_ROLES = ("owner", "admin")


class Membership(BaseModel):
    organization_id: str
    user_id: str
    role: str


def get_membership(supabase: Client, user_id: str, workspace_id: str) -> Optional[Membership]:
    result = supabase.table("organization_members")\
        .select("organization_id, user_id, role")\
        .eq("organization_id", workspace_id)\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    if not result.data:
        return None
    return Membership(**result.data[0])


def require_workspace_access(supabase: Client, user_id: str, workspace_id: str) -> Membership:
    """Return the caller's membership or raise WorkspaceAccessError"""
    membership = get_membership(supabase, user_id, workspace_id)
    if membership is None:
        raise WorkspaceAccessError()
    return membership


def require_role(membership: Membership, roles: Iterable[str] = ADMIN_ROLES) -> Membership:
    if membership.role not in tuple(roles):
        raise WorkspaceAccessError("You do not have the required role in this workspace.")
    return membership


def require_workspace_role(
    supabase: Client,
    user_id: str,
    workspace_id: str,
    roles: Iterable[str] = ADMIN_ROLES
) -> Membership:
    return require_role(require_workspace_access(supabase, user_id, workspace_id), roles)


def _get_one(supabase: Client, table: str, columns: str, **filters) -> Optional[Dict]:
    query = supabase.table(table).select(columns)
    for column, value in filters.items():
        query = query.eq(column, value)
    result = query.limit(1).execute()
    return result.data[0] if result.data else None


def get_project_workspace_id(supabase: Client, project_id: str) -> str:
    project = _get_one(supabase, "projects", "workspace_id", id=project_id)
    if project is None:
        raise NotFoundError("Project")
    return project["workspace_id"]


def get_table_workspace_id(supabase: Client, table_id: str) -> str:
    table = _get_one(supabase, "entity_tables", "workspace_id", id=table_id)
    if table is None:
        raise NotFoundError("Table")
    return table["workspace_id"]


def get_field_table_id(supabase: Client, field_id: str) -> str:
    field = _get_one(supabase, "entity_fields", "table_id", id=field_id)
    if field is None:
        raise NotFoundError("Field")
    return field["table_id"]


def require_project_in_workspace(supabase: Client, project_id: str, workspace_id: str) -> None:
    """Looked up by both ids: a project of another workspace is reported as missing"""
    if _get_one(supabase, "projects", "id", id=project_id, workspace_id=workspace_id) is None:
        raise NotFoundError("Project")


def require_project_access(supabase: Client, user_id: str, project_id: str) -> Membership:
    return require_workspace_access(supabase, user_id, get_project_workspace_id(supabase, project_id))


def require_table_access(supabase: Client, user_id: str, table_id: str) -> Membership:
    return require_workspace_access(supabase, user_id, get_table_workspace_id(supabase, table_id))


def require_field_access(supabase: Client, user_id: str, field_id: str) -> str:
    """Authorize via field -> table -> workspace; returns the field's table id"""
    table_id = get_field_table_id(supabase, field_id)
    require_table_access(supabase, user_id, table_id)
    return table_id
