"""make node names unique across the whole tree

Revision ID: 8b47d0e5c6a2
Revises: 3f1c2a9d7e01
Create Date: 2025-09-06 18:33:03.000000

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8b47d0e5c6a2"
down_revision: str | None = "3f1c2a9d7e01"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Sibling uniqueness stays; this adds global uniqueness on top of it
    with op.batch_alter_table("nodes") as batch_op:
        batch_op.create_unique_constraint("uq_nodes_name", ["name"])


def downgrade() -> None:
    with op.batch_alter_table("nodes") as batch_op:
        batch_op.drop_constraint("uq_nodes_name", type_="unique")
