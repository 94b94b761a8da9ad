"""Seed starter templates

Revision ID: 002
Revises: 001
Create Date: 2025-01-20 00:10:00.000000+00:00

What:  Inserts the ten public templates the mobile client ships with
       (Education, Coding, Marketing, Business, Creative).
Rollback: deletes exactly these rows by name.
"""

import uuid
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STARTER_TEMPLATES = [
    {
        "category": "Education",
        "name": "Study Summary",
        "description": "Create a concise summary of study material",
        "base_prompt": "Please summarize the following topic in a clear and concise way, highlighting the key points:",
        "default_languages": ["en", "am", "om"],
    },
    {
        "category": "Education",
        "name": "Explain Like I'm 5",
        "description": "Simplify complex topics for easy understanding",
        "base_prompt": "Explain the following concept in simple terms that a beginner can understand:",
        "default_languages": ["en", "am"],
    },
    {
        "category": "Coding",
        "name": "Code Explanation",
        "description": "Get detailed explanation of code",
        "base_prompt": "Please explain what this code does, step by step:",
        "default_languages": ["en"],
    },
    {
        "category": "Coding",
        "name": "Debug Helper",
        "description": "Find and fix bugs in code",
        "base_prompt": "Help me debug this code. Identify the issue and suggest a fix:",
        "default_languages": ["en"],
    },
    {
        "category": "Marketing",
        "name": "Social Media Caption",
        "description": "Create engaging social media captions",
        "base_prompt": "Create an engaging social media caption for the following content:",
        "default_languages": ["en", "am", "om", "ti"],
    },
    {
        "category": "Marketing",
        "name": "Product Description",
        "description": "Write compelling product descriptions",
        "base_prompt": "Write a compelling product description for:",
        "default_languages": ["en", "am"],
    },
    {
        "category": "Business",
        "name": "Email Writer",
        "description": "Compose professional emails",
        "base_prompt": "Help me write a professional email about:",
        "default_languages": ["en", "am"],
    },
    {
        "category": "Business",
        "name": "Meeting Summary",
        "description": "Summarize meeting notes",
        "base_prompt": "Create a structured summary of these meeting notes:",
        "default_languages": ["en"],
    },
    {
        "category": "Creative",
        "name": "Story Generator",
        "description": "Generate creative stories",
        "base_prompt": "Write a creative short story about:",
        "default_languages": ["en", "am", "om", "ti"],
    },
    {
        "category": "Creative",
        "name": "Poem Writer",
        "description": "Create beautiful poems",
        "base_prompt": "Write a poem about:",
        "default_languages": ["en", "am", "om", "ti"],
    },
]


def upgrade() -> None:
    templates = sa.table(
        "templates",
        sa.column("id", postgresql.UUID(as_uuid=True)),
        sa.column("category", sa.String),
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("base_prompt", sa.Text),
        sa.column("default_languages", sa.JSON),
        sa.column("is_public", sa.Boolean),
    )
    op.bulk_insert(
        templates,
        [{"id": uuid.uuid4(), "is_public": True, **row} for row in STARTER_TEMPLATES],
    )


def downgrade() -> None:
    names = [row["name"] for row in STARTER_TEMPLATES]
    templates = sa.table("templates", sa.column("name", sa.String))
    op.execute(templates.delete().where(templates.c.name.in_(names)))
