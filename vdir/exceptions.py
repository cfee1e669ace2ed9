"""Domain exceptions raised by the node store."""

from vdir.models.enums import ErrorCode

DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NAME_NOT_GIVEN: "Name is required",
    ErrorCode.TYPE_NOT_GIVEN: "Type is required",
    ErrorCode.INVALID_TYPE: "Type must be 'file' or 'folder'",
    ErrorCode.DUPLICATE_NAME: "A node with this name already exists",
    ErrorCode.PARENT_NOT_FOUND: "Parent node not found",
    ErrorCode.PARENT_NOT_FOLDER: "Parent node is not a folder",
    ErrorCode.PARENT_ID_NOT_GIVEN: "Parent id is required",
    ErrorCode.ID_NOT_GIVEN: "Node id is required",
    ErrorCode.NODE_NOT_FOUND: "Node not found",
    ErrorCode.NEW_NAME_NOT_GIVEN: "New name is required",
    ErrorCode.NAME_UNCHANGED: "New name is same as old name",
    ErrorCode.NEW_PARENT_NOT_FOUND: "New parent node not found",
    ErrorCode.NEW_PARENT_NOT_FOLDER: "New parent node is not a folder",
    ErrorCode.CANNOT_MOVE_INTO_DESCENDANT: "Cannot move a node into itself or its descendant",
    ErrorCode.TREE_TOO_DEEP: "Subtree is deeper than the configured depth limit",
}


class NodeError(Exception):
    """A domain validation failure identified by an ``ErrorCode``."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or DEFAULT_MESSAGES[code]
        super().__init__(f"{code.value}: {self.message}")
