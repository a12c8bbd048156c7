from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional


class CurrentUser(BaseModel):
    """Authenticated identity passed explicitly into every service call"""
    id: str
    email: str
    full_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str
    full_name: str = Field(min_length=2)
    invitation_token: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str
    access_token: Optional[str] = None
    token_type: str = "bearer"
    joined_organization_id: Optional[str] = None


class GateResponse(BaseModel):
    path: str
    authenticated: bool
    has_organization: bool
    redirect_to: Optional[str] = None
