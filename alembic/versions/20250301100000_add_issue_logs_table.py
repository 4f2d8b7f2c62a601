"""Add issue_logs table with optional author.

Revision ID: 20250301100000
Revises: 20250301000000
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20250301100000"
down_revision: Union[str, None] = "20250301000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "issue_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("issue_text", sa.Text(), nullable=False),
        # Nullable: legacy anonymous issues, and authors whose account was deleted.
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_issue_logs_user_id_users"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_issue_logs")),
    )
    op.create_index(op.f("ix_issue_logs_user_id"), "issue_logs", ["user_id"], unique=False)
    op.create_index(
        op.f("ix_issue_logs_created_at"), "issue_logs", ["created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_issue_logs_created_at"), table_name="issue_logs")
    op.drop_index(op.f("ix_issue_logs_user_id"), table_name="issue_logs")
    op.drop_table("issue_logs")
