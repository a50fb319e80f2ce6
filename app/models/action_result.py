from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ActionResult(BaseModel):
    """Discriminated result returned by every complaint operation.

    success=True  -> id / data / message
    success=False -> message (error kind), error (detail), error_type, errors
    """
    success: bool
    message: str
    id: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def ok(cls, message: str, id: Optional[str] = None, data: Any = None) -> "ActionResult":
        return cls(success=True, message=message, id=id, data=data)

    @classmethod
    def fail(cls, kind: str, error: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None) -> "ActionResult":
        return cls(success=False, message=kind, error=error, error_type=kind, errors=errors or [])
