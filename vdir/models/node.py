"""Node model."""

from sqlalchemy import Column, Enum, String, UniqueConstraint

from vdir.database import Base
from vdir.models.enums import NodeType
from vdir.models.mixins import SoftDeleteMixin, TimestampMixin


class Node(Base, TimestampMixin, SoftDeleteMixin):
    """A file or folder in the virtual namespace.

    The tree is stored as parent pointers: ``parent_id`` is NULL for root-level
    nodes and otherwise holds the id of a folder.
    """

    __tablename__ = "nodes"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(
        Enum(
            NodeType,
            name="nodetype",
            native_enum=False,
            length=16,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    # No foreign key: subtree deletes remove parents and children in one statement
    parent_id = Column(String(36), nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("parent_id", "name", name="uq_nodes_parent_name"),
        # Names are unique across the whole forest, not only among siblings
        UniqueConstraint("name", name="uq_nodes_name"),
    )

    @property
    def is_folder(self) -> bool:
        """Check if this node can hold children."""
        return self.type == NodeType.FOLDER

    def __repr__(self) -> str:
        return f"<Node {self.type.value if self.type else None} {self.name!r} id={self.id}>"
