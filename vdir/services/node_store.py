"""Persistence operations over the nodes table."""

import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vdir.exceptions import NodeError
from vdir.models.enums import ErrorCode, NodeType
from vdir.models.node import Node
from vdir.services.ancestry import AncestryChecker

logger = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def _sorted_by_name(nodes: list[Node]) -> list[Node]:
    # Codepoint order regardless of the database collation
    return sorted(nodes, key=lambda node: node.name)


class NodeStore:
    """Reads and writes Node rows.

    Methods flush but never commit. When a method raises ``NodeError`` after a
    failed flush the session must be rolled back by the caller before reuse.
    """

    def __init__(self, db: Session, ancestry: AncestryChecker | None = None):
        self.db = db
        self.ancestry = ancestry or AncestryChecker(db)

    def find_by_id(self, node_id: str) -> Node | None:
        """Get a node by id, or None."""
        if _is_blank(node_id):
            return None
        return self.db.scalars(select(Node).where(Node.id == node_id)).first()

    def find_by_name(self, name: str) -> Node | None:
        """Get a node by exact name, or None."""
        if _is_blank(name):
            return None
        return self.db.scalars(select(Node).where(Node.name == name)).first()

    def create(self, name: str, node_type: NodeType | str | None, parent_id: str | None) -> Node:
        """Insert a new node and return the stored row."""
        if _is_blank(name):
            raise NodeError(ErrorCode.NAME_NOT_GIVEN)
        if _is_blank(node_type):
            raise NodeError(ErrorCode.TYPE_NOT_GIVEN)
        try:
            node_type = NodeType(node_type)
        except ValueError as e:
            raise NodeError(
                ErrorCode.INVALID_TYPE, f"Type must be 'file' or 'folder', got {node_type!r}"
            ) from e

        parent_id = parent_id or None
        sibling_filter = (
            Node.parent_id.is_(None) if parent_id is None else Node.parent_id == parent_id
        )
        sibling = self.db.scalars(select(Node).where(sibling_filter, Node.name == name)).first()
        if sibling is not None:
            raise NodeError(ErrorCode.DUPLICATE_NAME, f"'{name}' already exists here")

        if parent_id is not None:
            parent = self.find_by_id(parent_id)
            if parent is None:
                raise NodeError(ErrorCode.PARENT_NOT_FOUND)
            if not parent.is_folder:
                raise NodeError(ErrorCode.PARENT_NOT_FOLDER, f"'{parent.name}' is a file")

        node = Node(id=str(uuid.uuid4()), name=name, type=node_type, parent_id=parent_id)
        self.db.add(node)
        self._flush(name)
        self.db.refresh(node)

        logger.info(f"Created {node_type.value} '{name}' ({node.id})")
        return node

    def list_children(self, parent_id: str) -> list[Node]:
        """List the children of a folder ordered by name."""
        if _is_blank(parent_id):
            raise NodeError(ErrorCode.PARENT_ID_NOT_GIVEN)

        parent = self.find_by_id(parent_id)
        if parent is None:
            raise NodeError(ErrorCode.PARENT_NOT_FOUND)
        if not parent.is_folder:
            raise NodeError(ErrorCode.PARENT_NOT_FOLDER, f"'{parent.name}' is a file")

        children = self.db.scalars(select(Node).where(Node.parent_id == parent_id)).all()
        return _sorted_by_name(list(children))

    def list_roots(self) -> list[Node]:
        """List root-level nodes ordered by name."""
        roots = self.db.scalars(select(Node).where(Node.parent_id.is_(None))).all()
        return _sorted_by_name(list(roots))

    def rename(self, node_id: str, new_name: str) -> Node:
        """Change a node's name.

        Collisions are left to the unique constraints and reported as
        ``DUPLICATE_NAME``.
        """
        if _is_blank(node_id):
            raise NodeError(ErrorCode.ID_NOT_GIVEN)
        if _is_blank(new_name):
            raise NodeError(ErrorCode.NEW_NAME_NOT_GIVEN)

        node = self._get_or_raise(node_id)
        old_name = node.name
        node.name = new_name
        node.updated_at = func.now()
        self._flush(new_name)
        self.db.refresh(node)

        logger.info(f"Renamed '{old_name}' to '{new_name}' ({node.id})")
        return node

    def move(self, node_id: str, new_parent_id: str | None) -> Node:
        """Re-parent a node; ``None`` moves it to the root level."""
        if _is_blank(node_id):
            raise NodeError(ErrorCode.ID_NOT_GIVEN)

        node = self._get_or_raise(node_id)
        new_parent_id = new_parent_id or None

        if new_parent_id is not None:
            new_parent = self.find_by_id(new_parent_id)
            if new_parent is None:
                raise NodeError(ErrorCode.NEW_PARENT_NOT_FOUND)
            if not new_parent.is_folder:
                raise NodeError(
                    ErrorCode.NEW_PARENT_NOT_FOLDER, f"'{new_parent.name}' is a file"
                )
            if self.ancestry.is_descendant_or_self(node.id, new_parent_id):
                raise NodeError(
                    ErrorCode.CANNOT_MOVE_INTO_DESCENDANT,
                    f"'{new_parent.name}' is '{node.name}' or one of its descendants",
                )

        node.parent_id = new_parent_id
        node.updated_at = func.now()
        self._flush(node.name)
        self.db.refresh(node)

        logger.info(f"Moved '{node.name}' under {new_parent_id or 'root'}")
        return node

    def delete_subtree(self, node_id: str) -> int:
        """Delete a node and all of its descendants in one statement.

        Returns the number of removed rows; an unknown id removes nothing.
        Raises ``TREE_TOO_DEEP`` before deleting anything when the iterative
        walk cannot reach the bottom of the subtree.
        """
        if _is_blank(node_id):
            raise NodeError(ErrorCode.ID_NOT_GIVEN)

        self.db.flush()
        stmt = (
            delete(Node)
            .where(self.ancestry.subtree_clause(node_id))
            .returning(Node.id)
            .execution_options(synchronize_session=False)
        )
        # rowcount is -1 on SQLite once the statement carries a WITH prefix
        removed = len(self.db.scalars(stmt).all())
        # Rows are gone server-side; drop any stale copies held by the session
        self.db.expire_all()

        logger.info(f"Deleted subtree {node_id}: {removed} nodes removed")
        return removed

    def _get_or_raise(self, node_id: str) -> Node:
        node = self.find_by_id(node_id)
        if node is None:
            raise NodeError(ErrorCode.NODE_NOT_FOUND)
        return node

    def _flush(self, name: str) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            if "unique" not in str(e.orig).lower():
                raise
            raise NodeError(ErrorCode.DUPLICATE_NAME, f"'{name}' already exists") from e
