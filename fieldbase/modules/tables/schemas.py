from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from fieldbase.modules.fields.schemas import FieldResponse


class TableCreate(BaseModel):
    workspace_id: UUID
    project_id: Optional[UUID] = None
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=1000)


class TableResponse(BaseModel):
    id: str
    workspace_id: str
    project_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class TableWithFieldsResponse(TableResponse):
    fields: List[FieldResponse]
