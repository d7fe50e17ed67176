"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Creates the team collaboration tables:
- Users keyed by identity provider id
- Teams with Stripe customer and subscription snapshot
- Members keyed by (team, user id or invitation code)
- Todos owned by teams
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        sa.Column("provider_id", sa.String(128), nullable=False),
        sa.Column("first_sign_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("team_list", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("provider_id"),
    )

    op.create_table(
        "teams",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("subscription_id", sa.String(255), nullable=True),
        sa.Column("subscription_product_id", sa.String(255), nullable=True),
        sa.Column("subscription_status", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "members",
        sa.Column("team_id", sa.String(32), nullable=False),
        sa.Column("member_id", sa.String(128), nullable=False),
        sa.Column("role", sa.Enum("OWNER", "ADMIN", "READ_ONLY", name="role"), nullable=False),
        sa.Column("status", sa.Enum("PENDING", "ACTIVE", name="invitationstatus"), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("team_id", "member_id"),
    )

    op.create_table(
        "todos",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("owner_id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_todos_owner_id", "todos", ["owner_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_todos_owner_id", table_name="todos")
    op.drop_table("todos")
    op.drop_table("members")
    op.drop_table("teams")
    op.drop_table("users")
    sa.Enum(name="role").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="invitationstatus").drop(op.get_bind(), checkfirst=True)
