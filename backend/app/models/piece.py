"""
Portfolio API — Piece SQLAlchemy Model
=======================================

What:  ORM model for the `pieces` table (one row per portfolio item).
Who:   Used by PieceService for CRUD and by Alembic for schema management.

Lifecycle:
    1. Created by POST /api/pieces/add-piece with only `name` set
    2. Filled in later, one field at a time or all at once
    3. Deleted by name (every row sharing that name)

Query Patterns:
    - Lookup by name:       WHERE name = :name        → idx_pieces_name
    - Filter by category:   WHERE category = :cat     → idx_pieces_category
    - Featured pieces:      WHERE featured IS TRUE
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Piece(Base):
    """
    A portfolio item.

    `name` is the lookup key used by the frontend but is not unique; the
    store may hold duplicates. `images` holds filenames from the file store,
    with no foreign key to the photos table.
    """

    __tablename__ = "pieces"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Store-assigned identifier, immutable",
    )

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Filenames of images in the file store, in display order
    images: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    alt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    long_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    features: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    featured: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Stored title-cased, e.g. "Home Decor"
    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_pieces_name", "name"),
        Index("idx_pieces_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<Piece(id={self.id}, name='{self.name}')>"
