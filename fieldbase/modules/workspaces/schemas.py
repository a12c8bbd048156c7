from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

MemberRole = Literal["owner", "admin", "member"]


class WorkspaceCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    slug: str = Field(min_length=2, max_length=255, pattern=r"^[a-z0-9-]+$")
    description: str = ""


class WorkspaceResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class WorkspaceWithRoleResponse(WorkspaceResponse):
    role: MemberRole


class WorkspaceMemberResponse(BaseModel):
    id: str  # user id
    email: str
    role: MemberRole
    joined_at: datetime


class WorkspaceMembersResponse(BaseModel):
    members: List[WorkspaceMemberResponse]
