from fastapi import APIRouter, Depends
from fieldbase.database.supabase_client import get_supabase
from fieldbase.core.dependencies import require_auth
from fieldbase.core.responses import ActionResult, success
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.fields.schemas import FIELD_TYPES, FieldCreate, FieldUpdate, FieldResponse
from fieldbase.modules.fields.service import FieldService
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/fields", tags=["fields"])


def get_field_service(supabase: Client = Depends(get_supabase)) -> FieldService:
    return FieldService(supabase)


@router.post("", response_model=ActionResult[FieldResponse], status_code=201)
async def create_field(
    field_data: FieldCreate,
    current_user: CurrentUser = Depends(require_auth),
    service: FieldService = Depends(get_field_service)
):
    """Add a field to a table; order_index is assigned by the server"""
    return success(service.create_field(field_data, current_user))


@router.get("/types", response_model=ActionResult[List[str]])
async def list_field_types():
    return success(list(FIELD_TYPES))


@router.patch("/{field_id}", response_model=ActionResult[FieldResponse])
async def update_field(
    field_id: UUID,
    field_data: FieldUpdate,
    current_user: CurrentUser = Depends(require_auth),
    service: FieldService = Depends(get_field_service)
):
    return success(service.update_field(str(field_id), field_data, current_user))


@router.delete("/{field_id}", response_model=ActionResult[None])
async def delete_field(
    field_id: UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: FieldService = Depends(get_field_service)
):
    service.delete_field(str(field_id), current_user)
    return success(None)
