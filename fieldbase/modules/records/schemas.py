from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class RecordCreate(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)


class RecordUpdate(BaseModel):
    data: Dict[str, Any]


class RecordResponse(BaseModel):
    id: str
    table_id: str
    data: Dict[str, Any]
    created_at: datetime
    updated_at: Optional[datetime] = None


class RecordPage(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(populate_by_name=True)

    records: List[RecordResponse]
    total: int
    page: int
    page_size: int = Field(alias="pageSize")
    has_next_page: bool = Field(alias="hasNextPage")
    has_previous_page: bool = Field(alias="hasPreviousPage")
    total_pages: int = Field(alias="totalPages")
