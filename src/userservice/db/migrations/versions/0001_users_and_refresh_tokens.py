"""users and refresh_tokens

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("nickname", sa.String(50), nullable=False),
        sa.Column("birth_date", sa.String(20), nullable=False),
        sa.Column("birth_time", sa.String(5), nullable=True),
        sa.Column("created_at", sa.String(15), nullable=False),
        sa.Column("updated_at", sa.String(15), nullable=False),
        sa.Column("deleted", sa.String(1), nullable=False, server_default="N"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("nickname", name="uq_users_nickname"),
    )
    op.create_table(
        "refresh_tokens",
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("users.id"),
            primary_key=True,
        ),
        sa.Column("token", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("refresh_tokens")
    op.drop_table("users")
