"""
PromptMaster Backend - Template SQLAlchemy Model
================================================

What:  ORM model for the `templates` table: reusable starter prompts grouped
       by category (Education, Coding, Marketing, Business, Creative).
Who:   Read by TemplateService; seeded by Alembic revision 002.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, Boolean, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from promptmaster.database import Base


class Template(Base):
    """
    A public prompt template.

    usage_count is incremented every time a template is opened, and the
    listing endpoints order by it so popular templates float to the top.
    """

    __tablename__ = "templates"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    category: Mapped[str] = mapped_column(String(50), nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    base_prompt: Mapped[str] = mapped_column(Text, nullable=False)

    # Language tags the template reads well in, e.g. ["en", "am"]
    default_languages: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: ["en"],
    )

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    usage_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_templates_category", "category"),
        Index("idx_templates_usage_count", usage_count.desc()),
    )

    def __repr__(self) -> str:
        return f"<Template(id={self.id}, category='{self.category}', name='{self.name}')>"
