from fastapi import APIRouter, Depends
from fieldbase.database.supabase_client import get_supabase
from fieldbase.core.dependencies import require_auth
from fieldbase.core.responses import ActionResult, success
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.tables.schemas import TableCreate, TableResponse, TableWithFieldsResponse
from fieldbase.modules.tables.service import TableService
from supabase import Client
from uuid import UUID

router = APIRouter(prefix="/tables", tags=["tables"])


def get_table_service(supabase: Client = Depends(get_supabase)) -> TableService:
    return TableService(supabase)


@router.post("", response_model=ActionResult[TableResponse], status_code=201)
async def create_table(
    table_data: TableCreate,
    current_user: CurrentUser = Depends(require_auth),
    service: TableService = Depends(get_table_service)
):
    """Create a table (requires workspace membership; project must belong to the same workspace)"""
    return success(service.create_table(table_data, current_user))


@router.get("/{table_id}", response_model=ActionResult[TableWithFieldsResponse])
async def get_table(
    table_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: TableService = Depends(get_table_service)
):
    """Get table with its fields sorted by order_index"""
    return success(service.get_table_with_fields(str(table_id), current_user))


@router.delete("/{table_id}", response_model=ActionResult[None])
async def delete_table(
    table_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: TableService = Depends(get_table_service)
):
    """Delete table with its fields and records"""
    service.delete_table(str(table_id), current_user)
    return success(None)
