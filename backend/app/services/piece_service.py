"""
Portfolio API — Piece Service
==============================

What:  Lookups, listings and updates for portfolio pieces.
Who:   Called by the handlers in app/routes/pieces.py.

Lookup semantics:
    - Reads by name or id return None when nothing matches (the route
      serializes that as JSON null).
    - Mutations whose target is missing raise NotFoundError.
    - When several pieces share a name or title, the oldest one is used.
"""

import logging
import re
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError
from app.models.piece import Piece
from app.schemas.piece import (
    PIECE_FIELD_SETTERS,
    PIECE_KEYS,
    PieceField,
    PieceReplace,
    PieceResponse,
)
from app.services.store import coerce_value, parse_record_id, resolve_field, store_errors

logger = logging.getLogger(__name__)

_UPPERCASE = re.compile(r"([A-Z])")


def format_category(segment: str) -> str:
    """
    Turn a camelCase URL segment into the stored category name.

    A space goes before every uppercase letter, the first character is
    uppercased and the result is trimmed:

        >>> format_category("homeDecor")
        'Home Decor'
        >>> format_category("Lighting")
        'Lighting'
    """
    spaced = _UPPERCASE.sub(r" \1", segment)
    return (spaced[:1].upper() + spaced[1:]).strip()


class PieceService:
    """
    Business logic for the `pieces` table.

    Responsibilities:
        - get_by_name() / get_by_id(): single lookups, None on a miss
        - list_all() / list_by_category() / list_featured(): listings
          ordered by creation time
        - keys(): attribute names from the schema definition
        - add() / set_featured() / replace_by_title() / update_field():
          writes, each returning the updated record
        - delete_by_name(): removes every piece with the name

    Every method receives the request's session; commits happen in
    get_db_session once the handler returns.

    Error Handling Strategy:
        Bad ids, unknown keys and mistyped values raise ValidationError
        before the store is touched. SQLAlchemy errors are wrapped in
        DatabaseError by store_errors(), so driver messages never reach
        the client.
    """

    # ── Reads ─────────────────────────────────────────────────────────────

    async def _first_by(self, db: AsyncSession, column, value) -> Optional[Piece]:
        result = await db.execute(
            select(Piece).where(column == value).order_by(Piece.created_at).limit(1)
        )
        return result.scalars().first()

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[PieceResponse]:
        with store_errors("retrieve the piece", name=name):
            piece = await self._first_by(db, Piece.name, name)
        return PieceResponse.model_validate(piece) if piece else None

    async def get_by_id(self, db: AsyncSession, piece_id: str) -> Optional[PieceResponse]:
        record_id = parse_record_id(piece_id, "piece")
        with store_errors("retrieve the piece", piece_id=piece_id):
            piece = await db.get(Piece, record_id)
        return PieceResponse.model_validate(piece) if piece else None

    async def _list(self, db: AsyncSession, *criteria) -> List[PieceResponse]:
        query = select(Piece).order_by(Piece.created_at)
        if criteria:
            query = query.where(*criteria)
        result = await db.execute(query)
        return [PieceResponse.model_validate(p) for p in result.scalars().all()]

    async def list_all(self, db: AsyncSession) -> List[PieceResponse]:
        with store_errors("retrieve pieces"):
            return await self._list(db)

    async def list_by_category(self, db: AsyncSession, segment: str) -> List[PieceResponse]:
        category = format_category(segment)
        logger.debug("Category segment '%s' → '%s'", segment, category)
        with store_errors("retrieve pieces", category=category):
            return await self._list(db, Piece.category == category)

    async def list_featured(self, db: AsyncSession) -> List[PieceResponse]:
        with store_errors("retrieve featured pieces"):
            return await self._list(db, Piece.featured.is_(True))

    def keys(self) -> List[str]:
        """Attribute names of the piece schema, used as admin table headers."""
        return list(PIECE_KEYS)

    # ── Writes ────────────────────────────────────────────────────────────

    async def add(self, db: AsyncSession, name: str) -> PieceResponse:
        """Insert a piece with only its name set."""
        piece = Piece(name=name)
        with store_errors("add the piece", name=name):
            db.add(piece)
            await db.flush()
        logger.info("Piece added: %s (%s)", piece.id, name)
        return PieceResponse.model_validate(piece)

    async def set_featured(self, db: AsyncSession, name: str, featured: bool) -> PieceResponse:
        with store_errors("update the piece", name=name):
            piece = await self._first_by(db, Piece.name, name)
            if piece is None:
                raise NotFoundError(resource="piece", resource_id=name)
            piece.featured = featured
            await db.flush()
        logger.info("Piece %s featured=%s", piece.id, featured)
        return PieceResponse.model_validate(piece)

    async def replace_by_title(
        self, db: AsyncSession, title: str, data: PieceReplace
    ) -> PieceResponse:
        """
        Overwrite every attribute of the piece whose title matches.

        Attributes missing from `data` are cleared, so callers send the
        whole record.
        """
        with store_errors("update the piece", title=title):
            piece = await self._first_by(db, Piece.title, title)
            if piece is None:
                raise NotFoundError(resource="piece", resource_id=title)
            for field in PieceField:
                attribute, _ = PIECE_FIELD_SETTERS[field]
                setattr(piece, attribute, getattr(data, attribute))
            await db.flush()
        logger.info("Piece %s replaced (matched title '%s')", piece.id, title)
        return PieceResponse.model_validate(piece)

    async def update_field(
        self, db: AsyncSession, piece_id: str, key: str, value
    ) -> PieceResponse:
        """
        Set one allow-listed attribute on the piece with the given id.

        Raises:
            ValidationError: Bad id, unknown key, or value of the wrong type
            NotFoundError:   No piece with that id
        """
        record_id = parse_record_id(piece_id, "piece")
        attribute, adapter = resolve_field(PieceField, PIECE_FIELD_SETTERS, key, "piece")
        new_value = coerce_value(adapter, key, value)

        with store_errors("update the piece", piece_id=piece_id, key=key):
            piece = await db.get(Piece, record_id)
            if piece is None:
                raise NotFoundError(resource="piece", resource_id=piece_id)
            setattr(piece, attribute, new_value)
            await db.flush()
        logger.info("Piece %s: %s updated", piece_id, key)
        return PieceResponse.model_validate(piece)

    async def delete_by_name(self, db: AsyncSession, name: str) -> str:
        """Remove every piece with this name."""
        with store_errors("delete the piece", name=name):
            result = await db.execute(delete(Piece).where(Piece.name == name))
        if not result.rowcount:
            raise NotFoundError(resource="piece", resource_id=name)
        logger.info("Deleted %d piece(s) named '%s'", result.rowcount, name)
        return f"{name} has been deleted"


piece_service = PieceService()
