"""Add termination_records.

Revision ID: 003
Revises: 002
Create Date: 2026-02-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "termination_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("reason", sa.String(255), nullable=False),
        sa.Column("initiated_by", sa.String(16), nullable=False, server_default="system"),
        sa.Column("final_choice", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("evidence_summary", sa.JSON(), nullable=True),
        sa.Column("notification_method", sa.String(16), nullable=False, server_default="dashboard"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_termination_records_user_id"), "termination_records", ["user_id"], unique=False)
    op.create_index(
        op.f("ix_termination_records_final_choice"), "termination_records", ["final_choice"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_termination_records_final_choice"), table_name="termination_records")
    op.drop_index(op.f("ix_termination_records_user_id"), table_name="termination_records")
    op.drop_table("termination_records")
