"""
Portfolio API — Application Package
====================================

What:  REST backend for the portfolio website (pieces, site info, images).
Who:   Imported by uvicorn (`uvicorn app.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Lookups, updates, uploads
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Pooled async sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
