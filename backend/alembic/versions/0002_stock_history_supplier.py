"""Supplier reference on stock history rows.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column("stock_history", sa.Column("supplier_id", sa.Integer(), nullable=True))
    op.create_index(
        op.f("ix_stock_history_supplier_id"), "stock_history", ["supplier_id"], unique=False
    )
    # Rows whose item still exists get its current supplier
    op.execute(
        "UPDATE stock_history SET supplier_id = ("
        "SELECT inventory_items.supplier_id FROM inventory_items "
        "WHERE inventory_items.id = stock_history.item_id)"
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_stock_history_supplier_id"), table_name="stock_history")
    with op.batch_alter_table("stock_history") as batch_op:
        batch_op.drop_column("supplier_id")
