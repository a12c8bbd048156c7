from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from fieldbase.core.exceptions import ActionError

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """Uniform result envelope: {success, data} or {success, error{code, message}}"""
    success: bool
    data: Optional[T] = None
    error: Optional[ActionError] = None


def success(data=None) -> dict:
    return {"success": True, "data": data}


def failure(error: ActionError) -> dict:
    return {"success": False, "error": error.model_dump(mode="json")}
