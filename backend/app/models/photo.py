"""
Portfolio API — Photo SQLAlchemy Model
=======================================

What:  Metadata for every image written to the file store.
How:   One row per stored file. The blob itself lives on disk under
       STORAGE_ROOT/<filename>; this table only records what was stored.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Photo(Base):
    __tablename__ = "photos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Generated name on disk, e.g. 1718028000123-3f9a1c2b-sunset.jpg
    filename: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Name the client sent; kept for display only
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)

    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Photo(filename='{self.filename}', size={self.size_bytes})>"
