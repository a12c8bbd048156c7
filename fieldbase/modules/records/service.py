import math
from datetime import datetime, timezone
from typing import Any, Dict, List

from supabase import Client

from fieldbase.config import settings
from fieldbase.core.access import require_table_access
from fieldbase.core.exceptions import NotFoundError, UnknownError
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.records.schemas import RecordPage, RecordResponse


def clamp_page(page: int) -> int:
    return max(1, page)


def clamp_page_size(page_size: int) -> int:
    """Oversized pages shrink to the maximum; zero or negative sizes get the default"""
    if page_size < 1:
        return settings.records_default_page_size
    return min(page_size, settings.records_max_page_size)


class RecordService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _count_records(self, table_id: str) -> int:
        result = self.supabase.table("entity_records")\
            .select("id", count="exact", head=True)\
            .eq("table_id", table_id)\
            .execute()
        return result.count or 0

    def list_records(self, table_id: str, user: CurrentUser, page: int = 1, page_size: int = 50) -> RecordPage:
        """One page of records, newest first"""
        require_table_access(self.supabase, user.id, table_id)

        page = clamp_page(page)
        page_size = clamp_page_size(page_size)
        offset = (page - 1) * page_size

        total = self._count_records(table_id)
        records: List[RecordResponse] = []
        # PostgREST answers 416 for a range starting past the last row
        if offset < total:
            result = self.supabase.table("entity_records")\
                .select("*")\
                .eq("table_id", table_id)\
                .order("created_at", desc=True)\
                .range(offset, offset + page_size - 1)\
                .execute()
            records = [RecordResponse(**r) for r in result.data or []]

        total_pages = math.ceil(total / page_size)
        return RecordPage(
            records=records,
            total=total,
            page=page,
            page_size=page_size,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
            total_pages=total_pages,
        )

    def get_record(self, record_id: str, table_id: str, user: CurrentUser) -> RecordResponse:
        require_table_access(self.supabase, user.id, table_id)
        result = self.supabase.table("entity_records")\
            .select("*")\
            .eq("id", record_id)\
            .eq("table_id", table_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise NotFoundError("Record")
        return RecordResponse(**result.data[0])

    def create_record(self, table_id: str, data: Dict[str, Any], user: CurrentUser) -> RecordResponse:
        """Store data as given; keys are field ids but are not checked against the table's fields"""
        require_table_access(self.supabase, user.id, table_id)

        result = self.supabase.table("entity_records").insert({
            "table_id": table_id,
            "data": data or {},
        }).execute()

        if not result.data:
            raise UnknownError("Failed to create record.")

        return RecordResponse(**result.data[0])

    def update_record(self, record_id: str, table_id: str, data: Dict[str, Any], user: CurrentUser) -> RecordResponse:
        """Replace the whole data map (no merge); scoped by table so ids of other tables miss"""
        require_table_access(self.supabase, user.id, table_id)

        result = self.supabase.table("entity_records")\
            .update({
                "data": data,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })\
            .eq("id", record_id)\
            .eq("table_id", table_id)\
            .execute()

        if not result.data:
            raise NotFoundError("Record")

        return RecordResponse(**result.data[0])

    def delete_record(self, record_id: str, table_id: str, user: CurrentUser) -> None:
        require_table_access(self.supabase, user.id, table_id)

        result = self.supabase.table("entity_records")\
            .delete()\
            .eq("id", record_id)\
            .eq("table_id", table_id)\
            .execute()

        if not result.data:
            raise NotFoundError("Record")
