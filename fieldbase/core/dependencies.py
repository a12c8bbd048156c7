"""
Core dependencies for route protection
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from fieldbase.database.supabase_client import get_supabase
from fieldbase.core.exceptions import AuthenticationError
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.auth.service import AuthService
from supabase import Client
from typing import Optional

# auto_error=False: a missing header must surface as AuthenticationError, not a bare 403
security = HTTPBearer(auto_error=False)

ACCESS_TOKEN_COOKIE = "access_token"


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_request_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


def require_token(token: Optional[str] = Depends(get_request_token)) -> str:
    if not token:
        raise AuthenticationError()
    return token


def require_auth(
    token: str = Depends(require_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> CurrentUser:
    """Resolve the authenticated user or raise AuthenticationError"""
    return auth_service.get_current_user(token)


def get_optional_user(
    token: Optional[str] = Depends(get_request_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[CurrentUser]:
    """Like require_auth, but anonymous requests get None"""
    if not token:
        return None
    try:
        return auth_service.get_current_user(token)
    except AuthenticationError:
        return None
