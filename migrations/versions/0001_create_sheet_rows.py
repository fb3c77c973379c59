"""create sheet_rows table

Revision ID: 0001_create_sheet_rows
Revises:
Create Date: 2026-10-19 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_create_sheet_rows"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sheet_rows",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("sheet", sa.String(length=64), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("cells", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sheet", "position", name="uq_sheet_rows_sheet_position"),
    )
    op.create_index(op.f("ix_sheet_rows_id"), "sheet_rows", ["id"], unique=False)
    op.create_index(op.f("ix_sheet_rows_sheet"), "sheet_rows", ["sheet"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_sheet_rows_sheet"), table_name="sheet_rows")
    op.drop_index(op.f("ix_sheet_rows_id"), table_name="sheet_rows")
    op.drop_table("sheet_rows")
