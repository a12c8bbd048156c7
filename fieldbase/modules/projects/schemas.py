from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from fieldbase.config.palette import DEFAULT_PROJECT_COLOR, normalize_color
from fieldbase.modules.tables.schemas import TableResponse


class ProjectCreate(BaseModel):
    workspace_id: UUID
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=1000)
    color: str = DEFAULT_PROJECT_COLOR

    @field_validator("color", mode="before")
    @classmethod
    def fallback_color(cls, value):
        return normalize_color(value)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    color: Optional[str] = None

    @field_validator("color", mode="before")
    @classmethod
    def fallback_color(cls, value):
        return normalize_color(value) if value is not None else None


class ProjectResponse(BaseModel):
    id: str
    workspace_id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProjectWithTablesResponse(ProjectResponse):
    tables: List[TableResponse]


class WorkspaceHierarchyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    projects: List[ProjectWithTablesResponse]
    tables_without_project: List[TableResponse] = Field(alias="tablesWithoutProject")
