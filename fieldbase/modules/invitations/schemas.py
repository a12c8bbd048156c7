from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, List
from datetime import datetime

from fieldbase.modules.workspaces.schemas import MemberRole


class InvitationCreate(BaseModel):
    email: EmailStr
    role: MemberRole = "member"

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class InvitationAccept(BaseModel):
    token: str


class InvitationResponse(BaseModel):
    id: str
    organization_id: str
    email: str
    token: str
    role: MemberRole
    created_by_user_id: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    accepted_by_user_id: Optional[str] = None


class InvitationListResponse(BaseModel):
    invitations: List[InvitationResponse]


class AcceptedInvitationResponse(BaseModel):
    organization_id: str
    role: MemberRole
