import logging
from typing import List

from supabase import Client

from fieldbase.core.access import (
    require_project_in_workspace, require_table_access, require_workspace_access
)
from fieldbase.core.exceptions import NotFoundError, UnknownError
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.fields.schemas import FieldResponse
from fieldbase.modules.tables.schemas import TableCreate, TableResponse, TableWithFieldsResponse

logger = logging.getLogger(__name__)


class TableService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_table(self, table_data: TableCreate, user: CurrentUser) -> TableResponse:
        """Create a table in a workspace, optionally inside one of its projects"""
        workspace_id = str(table_data.workspace_id)
        project_id = str(table_data.project_id) if table_data.project_id else None

        require_workspace_access(self.supabase, user.id, workspace_id)
        if project_id:
            require_project_in_workspace(self.supabase, project_id, workspace_id)

        result = self.supabase.table("entity_tables").insert({
            "workspace_id": workspace_id,
            "project_id": project_id,
            "name": table_data.name,
            "description": table_data.description,
        }).execute()

        if not result.data:
            raise UnknownError("Failed to create table.")

        return TableResponse(**result.data[0])

    def list_workspace_tables(self, workspace_id: str, user: CurrentUser) -> List[TableResponse]:
        """All tables of a workspace, newest first"""
        require_workspace_access(self.supabase, user.id, workspace_id)
        result = self.supabase.table("entity_tables")\
            .select("*")\
            .eq("workspace_id", workspace_id)\
            .order("created_at", desc=True)\
            .execute()
        return [TableResponse(**t) for t in result.data or []]

    def get_table_with_fields(self, table_id: str, user: CurrentUser) -> TableWithFieldsResponse:
        """Table with its fields in ascending order_index"""
        require_table_access(self.supabase, user.id, table_id)

        table_result = self.supabase.table("entity_tables")\
            .select("*")\
            .eq("id", table_id)\
            .limit(1)\
            .execute()
        if not table_result.data:
            raise NotFoundError("Table")

        fields_result = self.supabase.table("entity_fields")\
            .select("*")\
            .eq("table_id", table_id)\
            .order("created_at", desc=False)\
            .execute()

        # Stable sort: fields sharing an order_index stay in insertion order
        fields = sorted(
            (FieldResponse(**f) for f in fields_result.data or []),
            key=lambda f: f.order_index,
        )
        return TableWithFieldsResponse(**table_result.data[0], fields=fields)

    def delete_table(self, table_id: str, user: CurrentUser) -> None:
        """Hard delete; fields and records go with it (FK cascade)"""
        require_table_access(self.supabase, user.id, table_id)
        self.supabase.table("entity_tables")\
            .delete()\
            .eq("id", table_id)\
            .execute()
        logger.info(f"Table {table_id} deleted by {user.id}")
