"""
Error taxonomy shared by every service.

Services raise these; the exception handlers registered in main.py turn any
error (including raw PostgREST errors) into a failure envelope via
to_action_error, so callers never see store exceptions.
"""

from enum import Enum
from typing import Any, Optional

from fastapi.exceptions import RequestValidationError
from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError as PydanticValidationError


class ErrorCode(str, Enum):
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class AppError(Exception):
    code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    status_code: int = 500
    default_message = "An unknown error occurred."

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppError):
    code = ErrorCode.AUTHENTICATION_ERROR
    status_code = 401
    default_message = "You must be logged in."


class WorkspaceAccessError(AppError):
    code = ErrorCode.AUTHORIZATION_ERROR
    status_code = 403
    default_message = "You do not have access to this workspace."


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str = "Resource", message: Optional[str] = None):
        self.resource = resource
        super().__init__(message or f"{resource} not found.")


class ValidationError(AppError):
    code = ErrorCode.VALIDATION_ERROR
    status_code = 422
    default_message = "Validation failed. Please check your input."


class DatabaseError(AppError):
    code = ErrorCode.DATABASE_ERROR
    status_code = 409
    default_message = "Database operation failed. Please try again."


class UnknownError(AppError):
    pass


class ActionError(BaseModel):
    code: ErrorCode
    message: str
    details: Any = None


def is_constraint_violation(exc: APIError) -> bool:
    """SQLSTATE class 23 = integrity constraint violation (unique, foreign key, check...)"""
    return bool(exc.code) and str(exc.code).startswith("23")


def to_action_error(exc: BaseException, expose_unknown: bool = True) -> ActionError:
    """Map any exception to the structured error carried by failure results"""
    if isinstance(exc, AppError):
        return ActionError(code=exc.code, message=exc.message, details=exc.details)

    if isinstance(exc, (RequestValidationError, PydanticValidationError)):
        return ActionError(
            code=ErrorCode.VALIDATION_ERROR,
            message=ValidationError.default_message,
            details=_validation_details(exc),
        )

    if isinstance(exc, APIError):
        if is_constraint_violation(exc):
            return ActionError(
                code=ErrorCode.DATABASE_ERROR,
                message=DatabaseError.default_message,
                details={"code": exc.code, "message": exc.message},
            )
        return ActionError(
            code=ErrorCode.UNKNOWN_ERROR,
            message=exc.message if expose_unknown and exc.message else UnknownError.default_message,
        )

    return ActionError(
        code=ErrorCode.UNKNOWN_ERROR,
        message=str(exc) if expose_unknown and str(exc) else UnknownError.default_message,
    )


def status_code_for(error: ActionError) -> int:
    return {
        ErrorCode.AUTHENTICATION_ERROR: AuthenticationError.status_code,
        ErrorCode.AUTHORIZATION_ERROR: WorkspaceAccessError.status_code,
        ErrorCode.NOT_FOUND: NotFoundError.status_code,
        ErrorCode.VALIDATION_ERROR: ValidationError.status_code,
        ErrorCode.DATABASE_ERROR: DatabaseError.status_code,
    }.get(error.code, 500)


def _validation_details(exc) -> list:
    # Drop "input"/"ctx" so passwords and raw payloads are not echoed back
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
