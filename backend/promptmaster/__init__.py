"""
PromptMaster Backend - Application Package Initializer
======================================================

What: Marks the `promptmaster` directory as a Python package.
Who:  Imported by uvicorn (`promptmaster.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Pipeline + Business)    │  ← normalize → generate → localize
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The translation pipeline lives entirely in the services layer; routes only
    unpack requests and hand them over.
"""

__version__ = "1.0.0"
