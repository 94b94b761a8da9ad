"""
PromptMaster Backend - Prompt SQLAlchemy Model
==============================================

What:  ORM model for the `prompts` table: one row per finished pipeline run.
Who:   Written by PromptService after the pipeline completes; read by the
       history endpoints (list, detail, favorite, delete).
When:  A row exists only for successful runs. Failed requests never reach
       persistence.

Columns mirror PipelineResult plus the request metadata that produced it:
    user_id             caller that owns the row (X-User-ID); every history
                        query is scoped by it
    input_text          what the user typed (or the voice transcript)
    english_input       text sent to the model after normalization
    english_output      generated answer / improved prompt (English)
    english_critique    critique for improve runs, NULL for generate runs
    localized_*         back-translations, NULL when the target is English
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from promptmaster.database import Base


class PromptRecord(Base):
    """
    A stored prompt and its pipeline output.

    Query Patterns:
        - History: WHERE user_id = :user ORDER BY created_at DESC
          LIMIT :limit OFFSET :offset (idx_prompts_user_created_at)
        - Filter by category / favorites on top of the same ordering
    """

    __tablename__ = "prompts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Owner of the prompt (caller identity from X-User-ID)",
    )

    input_text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Original user input (typed text or voice transcript)",
    )

    english_input: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Input after translation to English; NULL when already English",
    )

    english_output: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Generated response or improved prompt in English",
    )

    english_critique: Mapped[str | None] = mapped_column(Text, nullable=True)

    localized_output: Mapped[str | None] = mapped_column(Text, nullable=True)

    localized_critique: Mapped[str | None] = mapped_column(Text, nullable=True)

    source_language: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default="en",
        server_default=text("'en'"),
    )

    target_language: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default="en",
        server_default=text("'en'"),
    )

    # Values: generate, improve, transcribe_improve
    mode: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="improve",
        server_default=text("'improve'"),
    )

    category: Mapped[str | None] = mapped_column(String(50), nullable=True)

    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_prompts_user_created_at", user_id, created_at.desc()),
        Index("idx_prompts_category", "category"),
    )

    def __repr__(self) -> str:
        return (
            f"<PromptRecord(id={self.id}, user='{self.user_id}', mode='{self.mode}', "
            f"language='{self.target_language}')>"
        )
