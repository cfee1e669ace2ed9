"""Subtree closure queries over the parent-pointer table."""

import logging

from sqlalchemy import ColumnElement, select
from sqlalchemy.orm import Session, aliased

from vdir.config import ClosureStrategy, get_settings
from vdir.exceptions import NodeError
from vdir.models.enums import ErrorCode
from vdir.models.node import Node

logger = logging.getLogger(__name__)

# Parent ids bound per frontier query; stays under SQLite's bound-parameter limit
IN_CLAUSE_CHUNK = 500


class AncestryChecker:
    """Answers descendant questions by walking parent -> child edges.

    Two strategies are available. ``recursive_cte`` asks the database for the
    closure with ``WITH RECURSIVE``; rows are combined with ``UNION`` so a
    cycle in malformed data stops producing new rows and the query ends.
    ``iterative`` expands a frontier one level per query and never revisits
    an id. If nodes remain below ``max_depth`` levels it raises
    ``TREE_TOO_DEEP`` instead of answering from a partial subtree.
    """

    def __init__(
        self,
        db: Session,
        strategy: ClosureStrategy | None = None,
        max_depth: int | None = None,
    ):
        settings = get_settings()
        self.db = db
        self.strategy = strategy or settings.closure_strategy
        self.max_depth = max_depth or settings.max_tree_depth

    def is_descendant_or_self(self, source_id: str, target_id: str) -> bool:
        """Check if ``target_id`` is ``source_id`` or lies in its subtree."""
        if not source_id or not target_id:
            return False
        if source_id == target_id:
            return True

        if self.strategy == ClosureStrategy.RECURSIVE_CTE:
            subtree = self._subtree_cte(source_id)
            stmt = select(subtree.c.id).where(subtree.c.id == target_id).limit(1)
            return self.db.execute(stmt).first() is not None

        return target_id in self._walk(source_id, stop_at=target_id)

    def descendant_ids(self, source_id: str) -> set[str]:
        """Return the ids of ``source_id`` and all of its descendants.

        Empty when the source node does not exist.
        """
        if self.strategy == ClosureStrategy.RECURSIVE_CTE:
            subtree = self._subtree_cte(source_id)
            return set(self.db.scalars(select(subtree.c.id)))
        return self._walk(source_id)

    def subtree_clause(self, source_id: str) -> ColumnElement[bool]:
        """Build a WHERE clause matching every node in the subtree of ``source_id``.

        The iterative strategy binds one parameter per subtree id, so a single
        subtree wider than the backend's parameter limit (32766 on current
        SQLite) needs ``recursive_cte``.
        """
        if self.strategy == ClosureStrategy.RECURSIVE_CTE:
            subtree = self._subtree_cte(source_id)
            return Node.id.in_(select(subtree.c.id))
        return Node.id.in_(sorted(self._walk(source_id)))

    def _subtree_cte(self, source_id: str):
        subtree = select(Node.id).where(Node.id == source_id).cte("subtree", recursive=True)
        child = aliased(Node, name="child")
        return subtree.union(
            select(child.id).join(subtree, child.parent_id == subtree.c.id)
        )

    def _walk(self, source_id: str, stop_at: str | None = None) -> set[str]:
        exists = self.db.scalars(select(Node.id).where(Node.id == source_id)).first()
        if exists is None:
            return set()

        visited = {source_id}
        frontier = {source_id}
        depth = 0
        while frontier:
            frontier = self._children_of(frontier) - visited
            if stop_at is not None and stop_at in frontier:
                visited |= frontier
                break
            if frontier and depth >= self.max_depth:
                logger.warning(
                    f"Subtree walk from {source_id} stopped at depth {depth}; "
                    f"{len(frontier)} nodes left unexpanded"
                )
                raise NodeError(
                    ErrorCode.TREE_TOO_DEEP,
                    f"Subtree of {source_id} is deeper than {self.max_depth} levels",
                )
            visited |= frontier
            depth += 1
        return visited

    def _children_of(self, parent_ids: set[str]) -> set[str]:
        ordered = sorted(parent_ids)
        children: set[str] = set()
        for start in range(0, len(ordered), IN_CLAUSE_CHUNK):
            chunk = ordered[start : start + IN_CLAUSE_CHUNK]
            children.update(self.db.scalars(select(Node.id).where(Node.parent_id.in_(chunk))))
        return children
