from fastapi import APIRouter, Depends, Query
from fieldbase.database.supabase_client import get_supabase
from fieldbase.config import settings
from fieldbase.core.dependencies import require_auth
from fieldbase.core.responses import ActionResult, success
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.records.schemas import RecordCreate, RecordUpdate, RecordResponse, RecordPage
from fieldbase.modules.records.service import RecordService
from supabase import Client
from typing import Optional
from uuid import UUID

router = APIRouter(prefix="/tables/{table_id}/records", tags=["records"])


def get_record_service(supabase: Client = Depends(get_supabase)) -> RecordService:
    return RecordService(supabase)


@router.get("", response_model=ActionResult[RecordPage])
async def list_records(
    table_id: UUID,
    page: int = 1,
    page_size: Optional[int] = None,
    page_size_alias: Optional[int] = Query(None, alias="pageSize"),
    current_user: CurrentUser = Depends(require_auth),
    service: RecordService = Depends(get_record_service)
):
    """Paginated records, newest first (page >= 1, page_size or pageSize clamped to the configured maximum)"""
    if page_size is None:
        page_size = page_size_alias if page_size_alias is not None else settings.records_default_page_size
    return success(service.list_records(str(table_id), current_user, page=page, page_size=page_size))


@router.post("", response_model=ActionResult[RecordResponse], status_code=201)
async def create_record(
    table_id: UUID,
    record_data: RecordCreate,
    current_user: CurrentUser = Depends(require_auth),
    service: RecordService = Depends(get_record_service)
):
    return success(service.create_record(str(table_id), record_data.data, current_user))


@router.get("/{record_id}", response_model=ActionResult[RecordResponse])
async def get_record(
    table_id: UUID,
    record_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: RecordService = Depends(get_record_service)
):
    return success(service.get_record(str(record_id), str(table_id), current_user))


@router.put("/{record_id}", response_model=ActionResult[RecordResponse])
async def update_record(
    table_id: UUID,
    record_id: UUID,
    record_data: RecordUpdate,
    current_user: CurrentUser = Depends(require_auth),
    service: RecordService = Depends(get_record_service)
):
    """Replace the record's data map"""
    return success(service.update_record(str(record_id), str(table_id), record_data.data, current_user))


@router.delete("/{record_id}", response_model=ActionResult[None])
async def delete_record(
    table_id: UUID,
    record_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: RecordService = Depends(get_record_service)
):
    service.delete_record(str(record_id), str(table_id), current_user)
    return success(None)
