from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, Literal, get_args
from uuid import UUID
from datetime import datetime

FieldType = Literal[
    "text",
    "number",
    "select",
    "date",
    "boolean",
    "email",
    "url",
    "richtext",
    "json",
    "relation",
]

FIELD_TYPES = get_args(FieldType)


class FieldCreate(BaseModel):
    table_id: UUID
    name: str = Field(min_length=1, max_length=255)
    type: FieldType
    options: Dict[str, Any] = Field(default_factory=dict)


class FieldUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[FieldType] = None
    options: Optional[Dict[str, Any]] = None
    order_index: Optional[int] = Field(default=None, ge=0)


class FieldResponse(BaseModel):
    id: str
    table_id: str
    name: str
    type: FieldType
    order_index: int
    options: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
