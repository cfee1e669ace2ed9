"""Node schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from vdir.models.enums import ErrorCode, NodeType


class NodeResponse(BaseModel):
    """Node as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: NodeType
    parent_id: str | None
    created_at: datetime
    updated_at: datetime


class OperationResult(BaseModel):
    """Outcome of a namespace operation.

    Callers check ``ok`` before reading ``value``; a failed result carries an
    ``error`` code and a human readable ``message``.
    """

    ok: bool
    value: Any = None
    error: ErrorCode | None = None
    message: str | None = None

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorCode, message: str) -> "OperationResult":
        return cls(ok=False, error=error, message=message)
