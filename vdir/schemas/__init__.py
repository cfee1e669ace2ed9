"""Pydantic schemas for service results."""

from vdir.schemas.node import NodeResponse, OperationResult

__all__ = [
    "NodeResponse",
    "OperationResult",
]
