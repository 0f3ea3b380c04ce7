"""Add violation_logs with a unique (user_id, type, week_number).

Revision ID: 002
Revises: 001
Create Date: 2026-02-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "violation_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("severity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("detected_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolution", sa.String(32), nullable=True),
        sa.Column("user_response", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "type", "week_number", name="uq_violation_logs_user_type_week"),
    )
    op.create_index(op.f("ix_violation_logs_user_id"), "violation_logs", ["user_id"], unique=False)
    op.create_index(op.f("ix_violation_logs_week_number"), "violation_logs", ["week_number"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_violation_logs_week_number"), table_name="violation_logs")
    op.drop_index(op.f("ix_violation_logs_user_id"), table_name="violation_logs")
    op.drop_table("violation_logs")
