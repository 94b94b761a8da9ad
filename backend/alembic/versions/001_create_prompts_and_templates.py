"""Create prompts and templates tables

Revision ID: 001
Revises: None
Create Date: 2025-01-20 00:00:00.000000+00:00

What:  Creates `prompts` (finished pipeline runs, owned by a user) and `templates`
       (public prompt templates).
How:   PostgreSQL UUID primary keys and TIMESTAMP WITH TIME ZONE; see
       promptmaster/models/ for the column documentation.

Rollback: downgrade() drops both tables (all history is lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "prompts",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(64),
            nullable=False,
            comment="Owner of the prompt (caller identity from X-User-ID)",
        ),
        sa.Column(
            "input_text",
            sa.Text(),
            nullable=False,
            comment="Original user input (typed text or voice transcript)",
        ),
        sa.Column(
            "english_input",
            sa.Text(),
            nullable=True,
            comment="Input after translation to English; NULL when already English",
        ),
        sa.Column(
            "english_output",
            sa.Text(),
            nullable=False,
            comment="Generated response or improved prompt in English",
        ),
        sa.Column("english_critique", sa.Text(), nullable=True),
        sa.Column("localized_output", sa.Text(), nullable=True),
        sa.Column("localized_critique", sa.Text(), nullable=True),
        sa.Column("source_language", sa.String(8), nullable=False, server_default=sa.text("'en'")),
        sa.Column("target_language", sa.String(8), nullable=False, server_default=sa.text("'en'")),
        sa.Column(
            "mode",
            sa.String(32),
            nullable=False,
            server_default=sa.text("'improve'"),
            comment="generate, improve or transcribe_improve",
        ),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("is_favorite", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # History pages are per user, newest first
    op.create_index(
        "idx_prompts_user_created_at",
        "prompts",
        ["user_id", sa.text("created_at DESC")],
    )
    op.create_index("idx_prompts_category", "prompts", ["category"])

    op.create_table(
        "templates",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("base_prompt", sa.Text(), nullable=False),
        sa.Column(
            "default_languages",
            sa.JSON(),
            nullable=False,
            server_default=sa.text("'[\"en\"]'"),
        ),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_templates_category", "templates", ["category"])
    op.create_index("idx_templates_usage_count", "templates", [sa.text("usage_count DESC")])


def downgrade() -> None:
    op.drop_index("idx_templates_usage_count", table_name="templates")
    op.drop_index("idx_templates_category", table_name="templates")
    op.drop_table("templates")
    op.drop_index("idx_prompts_category", table_name="prompts")
    op.drop_index("idx_prompts_user_created_at", table_name="prompts")
    op.drop_table("prompts")
