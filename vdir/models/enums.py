"""Enums for model fields and domain errors."""

from enum import Enum


class NodeType(str, Enum):
    """Kinds of nodes in the namespace."""

    FILE = "file"
    FOLDER = "folder"


class ErrorCode(str, Enum):
    """Domain validation failures reported by the store and service."""

    NAME_NOT_GIVEN = "NAME_NOT_GIVEN"
    TYPE_NOT_GIVEN = "TYPE_NOT_GIVEN"
    INVALID_TYPE = "INVALID_TYPE"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    PARENT_NOT_FOUND = "PARENT_NOT_FOUND"
    PARENT_NOT_FOLDER = "PARENT_NOT_FOLDER"
    PARENT_ID_NOT_GIVEN = "PARENT_ID_NOT_GIVEN"
    ID_NOT_GIVEN = "ID_NOT_GIVEN"
    NODE_NOT_FOUND = "NODE_NOT_FOUND"
    NEW_NAME_NOT_GIVEN = "NEW_NAME_NOT_GIVEN"
    NAME_UNCHANGED = "NAME_UNCHANGED"
    NEW_PARENT_NOT_FOUND = "NEW_PARENT_NOT_FOUND"
    NEW_PARENT_NOT_FOLDER = "NEW_PARENT_NOT_FOLDER"
    CANNOT_MOVE_INTO_DESCENDANT = "CANNOT_MOVE_INTO_DESCENDANT"
    TREE_TOO_DEEP = "TREE_TOO_DEEP"
