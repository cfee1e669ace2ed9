"""SQLAlchemy models."""

from vdir.models.enums import ErrorCode, NodeType
from vdir.models.node import Node

__all__ = [
    "Node",
    "NodeType",
    "ErrorCode",
]
