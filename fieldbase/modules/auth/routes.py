from fastapi import APIRouter, Depends, Request
from fieldbase.config import settings
from fieldbase.core.dependencies import (
    get_auth_service, get_optional_user, require_auth, require_token
)
from fieldbase.core.navigation import resolve_redirect
from fieldbase.core.rate_limit import limiter
from fieldbase.core.responses import ActionResult, success
from fieldbase.modules.auth.schemas import (
    CurrentUser, GateResponse, LoginRequest, RegisterRequest, RegisterResponse, TokenResponse
)
from fieldbase.modules.auth.service import AuthService
from typing import Optional

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ActionResult[RegisterResponse], status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user, sign them in and accept an invitation when a token is given"""
    return success(service.register(register_data))


@router.post("/login", response_model=ActionResult[TokenResponse])
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return success(service.login(login_data))


@router.post("/logout", response_model=ActionResult[dict])
async def logout(
    token: str = Depends(require_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return success({"message": "Logged out successfully"})


@router.get("/me", response_model=ActionResult[CurrentUser])
async def get_current_user(current_user: CurrentUser = Depends(require_auth)):
    """Get current authenticated user"""
    return success(current_user)


@router.get("/gate", response_model=ActionResult[GateResponse])
async def route_gate(
    path: str,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    service: AuthService = Depends(get_auth_service)
):
    """Tell the page renderer whether a page request must be redirected (login / onboarding / dashboard)"""
    authenticated = current_user is not None
    has_organization = authenticated and service.has_organization(current_user.id)
    return success(GateResponse(
        path=path,
        authenticated=authenticated,
        has_organization=has_organization,
        redirect_to=resolve_redirect(path, authenticated, has_organization),
    ))
