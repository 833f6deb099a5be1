"""Initial schema - lrm_list, lrm_item, lrm_list_item.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "lrm_list",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("description", sa.String(2048), nullable=True),
        sa.Column("public", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("owner", sa.String(255), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("creator", sa.String(255), nullable=False),
        sa.Column("updated", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updater", sa.String(255), nullable=False),
    )
    op.create_index("ix_lrm_list_owner", "lrm_list", ["owner"])

    op.create_table(
        "lrm_item",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("description", sa.String(2048), nullable=True),
        sa.Column("owner", sa.String(255), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("creator", sa.String(255), nullable=False),
        sa.Column("updated", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updater", sa.String(255), nullable=False),
    )
    op.create_index("ix_lrm_item_owner", "lrm_item", ["owner"])

    op.create_table(
        "lrm_list_item",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "list_id", UUID(as_uuid=True),
            sa.ForeignKey("lrm_list.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "item_id", UUID(as_uuid=True),
            sa.ForeignKey("lrm_item.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_suppressed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("list_id", "item_id", name="uq_lrm_list_item_list_id_item_id"),
        sa.CheckConstraint("quantity >= 0", name="ck_lrm_list_item_quantity"),
    )
    op.create_index("ix_lrm_list_item_list_id", "lrm_list_item", ["list_id"])
    op.create_index("ix_lrm_list_item_item_id", "lrm_list_item", ["item_id"])


def downgrade() -> None:
    op.drop_index("ix_lrm_list_item_item_id", table_name="lrm_list_item")
    op.drop_index("ix_lrm_list_item_list_id", table_name="lrm_list_item")
    op.drop_table("lrm_list_item")
    op.drop_index("ix_lrm_item_owner", table_name="lrm_item")
    op.drop_table("lrm_item")
    op.drop_index("ix_lrm_list_owner", table_name="lrm_list")
    op.drop_table("lrm_list")
