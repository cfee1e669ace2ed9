"""Name-addressed operations on the namespace."""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vdir.exceptions import NodeError
from vdir.models.enums import ErrorCode
from vdir.models.node import Node
from vdir.schemas.node import NodeResponse, OperationResult
from vdir.services.node_store import NodeStore

logger = logging.getLogger(__name__)


class NamespaceService:
    """Service translating node names into validated store calls.

    Each operation runs in its own transaction: it commits when the store
    call succeeds and rolls back on any failure. Validation problems come
    back as a failed ``OperationResult``; database errors are re-raised.
    """

    def __init__(self, db: Session, store: NodeStore | None = None):
        self.db = db
        self.store = store or NodeStore(db)

    def create_node(
        self, name: str, node_type: str | None, parent_name: str | None = None
    ) -> OperationResult:
        """Create a node, optionally inside the folder called ``parent_name``."""

        def _create() -> NodeResponse:
            parent_id = None
            if parent_name:
                parent = self._resolve(parent_name, ErrorCode.PARENT_NOT_FOUND)
                if not parent.is_folder:
                    raise NodeError(ErrorCode.PARENT_NOT_FOLDER, f"'{parent_name}' is a file")
                parent_id = parent.id
            return NodeResponse.model_validate(self.store.create(name, node_type, parent_id))

        return self._run("create", _create)

    def list_nodes(self, parent_name: str | None = None) -> OperationResult:
        """List the children of a folder, or the root level when no name is given."""

        def _list() -> list[NodeResponse]:
            if not parent_name:
                nodes = self.store.list_roots()
            else:
                parent = self._resolve(parent_name)
                if not parent.is_folder:
                    raise NodeError(ErrorCode.PARENT_NOT_FOLDER, f"'{parent_name}' is a file")
                nodes = self.store.list_children(parent.id)
            return [NodeResponse.model_validate(node) for node in nodes]

        return self._run("list", _list)

    def get_node(self, name: str) -> OperationResult:
        """Look up a single node by name."""
        return self._run("info", lambda: NodeResponse.model_validate(self._resolve(name)))

    def rename_node(self, name: str, new_name: str) -> OperationResult:
        """Rename the node called ``name``."""

        def _rename() -> NodeResponse:
            node = self._resolve(name)
            if node.name == new_name:
                raise NodeError(ErrorCode.NAME_UNCHANGED)
            return NodeResponse.model_validate(self.store.rename(node.id, new_name))

        return self._run("rename", _rename)

    def move_node(self, name: str, new_parent_name: str | None) -> OperationResult:
        """Move the node called ``name`` under ``new_parent_name`` (root if None)."""

        def _move() -> NodeResponse:
            node = self._resolve(name)
            new_parent_id = None
            if new_parent_name:
                new_parent = self._resolve(new_parent_name, ErrorCode.NEW_PARENT_NOT_FOUND)
                if not new_parent.is_folder:
                    raise NodeError(
                        ErrorCode.NEW_PARENT_NOT_FOLDER, f"'{new_parent_name}' is a file"
                    )
                new_parent_id = new_parent.id
            return NodeResponse.model_validate(self.store.move(node.id, new_parent_id))

        return self._run("move", _move)

    def remove_node(self, name: str) -> OperationResult:
        """Remove the node called ``name`` together with its subtree."""
        return self._run("remove", lambda: self.store.delete_subtree(self._resolve(name).id))

    def _resolve(self, name: str, missing: ErrorCode = ErrorCode.NODE_NOT_FOUND) -> Node:
        if not name:
            raise NodeError(ErrorCode.NAME_NOT_GIVEN)
        node = self.store.find_by_name(name)
        if node is None:
            raise NodeError(missing, f"'{name}' not found")
        return node

    def _run(self, operation: str, action: Callable[[], Any]) -> OperationResult:
        try:
            value = action()
            self.db.commit()
        except NodeError as e:
            self.db.rollback()
            logger.warning(f"{operation} rejected: {e.code.value} ({e.message})")
            return OperationResult.failure(e.code, e.message)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"{operation} failed with a database error")
            raise
        return OperationResult.success(value)
