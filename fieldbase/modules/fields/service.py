from datetime import datetime, timezone

from supabase import Client

from fieldbase.core.access import require_field_access, require_table_access
from fieldbase.core.exceptions import NotFoundError, UnknownError, ValidationError
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.fields.schemas import FieldCreate, FieldUpdate, FieldResponse


class FieldService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def next_order_index(self, table_id: str) -> int:
        """1 + highest order_index of the table, 0 for the first field"""
        result = self.supabase.table("entity_fields")\
            .select("order_index")\
            .eq("table_id", table_id)\
            .order("order_index", desc=True)\
            .limit(1)\
            .execute()
        if not result.data:
            return 0
        return result.data[0]["order_index"] + 1

    def create_field(self, field_data: FieldCreate, user: CurrentUser) -> FieldResponse:
        """Create a field at the end of the table's column order"""
        table_id = str(field_data.table_id)
        require_table_access(self.supabase, user.id, table_id)

        result = self.supabase.table("entity_fields").insert({
            "table_id": table_id,
            "name": field_data.name,
            "type": field_data.type,
            "options": field_data.options or {},
            "order_index": self.next_order_index(table_id),
        }).execute()

        if not result.data:
            raise UnknownError("Failed to create field.")

        return FieldResponse(**result.data[0])

    def update_field(self, field_id: str, field_data: FieldUpdate, user: CurrentUser) -> FieldResponse:
        """Partial update: only supplied keys are written, an empty update is rejected"""
        update_data = {
            key: value for key, value in field_data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not update_data:
            raise ValidationError("At least one field must be updated.")

        require_field_access(self.supabase, user.id, field_id)

        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self.supabase.table("entity_fields")\
            .update(update_data)\
            .eq("id", field_id)\
            .execute()

        if not result.data:
            raise NotFoundError("Field")

        return FieldResponse(**result.data[0])

    def delete_field(self, field_id: str, user: CurrentUser) -> None:
        """Hard delete; record values stored under this field id are left as they are"""
        require_field_access(self.supabase, user.id, field_id)
        self.supabase.table("entity_fields")\
            .delete()\
            .eq("id", field_id)\
            .execute()
