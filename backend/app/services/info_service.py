"""
Portfolio API — Info Service
=============================

What:  Listing, creation and single-field updates for site info records.
Why:   The site's contact and about text lives in the database so the
       admin page can edit it without a redeploy.
How:   Same store helpers as PieceService: ids are parsed up front, keys
       go through the InfoField allow-list, driver errors become
       DatabaseError.
Who:   Called by the handlers in app/routes/info.py.
"""

import logging
from typing import Any, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError
from app.models.info import Info
from app.schemas.info import INFO_FIELD_SETTERS, InfoField, InfoResponse
from app.services.store import coerce_value, parse_record_id, resolve_field, store_errors

logger = logging.getLogger(__name__)


class InfoService:
    """
    Business logic for the `info` table.

    Responsibilities:
        - list_all(): every info record (no ordering guarantee)
        - add(): create an empty record for the admin page to fill in
        - update_field(): set one allow-listed attribute

    Error Handling Strategy:
        Malformed ids and unknown keys raise ValidationError before any
        query runs. A missing record raises NotFoundError.
    """

    async def list_all(self, db: AsyncSession) -> List[InfoResponse]:
        with store_errors("retrieve site info"):
            result = await db.execute(select(Info))
            return [InfoResponse.model_validate(i) for i in result.scalars().all()]

    async def add(self, db: AsyncSession) -> InfoResponse:
        info = Info()
        with store_errors("add site info"):
            db.add(info)
            await db.flush()
        logger.info("Info record added: %s", info.id)
        return InfoResponse.model_validate(info)

    async def update_field(
        self, db: AsyncSession, info_id: str, key: str, value: Any
    ) -> InfoResponse:
        """Set one allow-listed attribute; same rules as piece updates."""
        record_id = parse_record_id(info_id, "info")
        attribute, adapter = resolve_field(InfoField, INFO_FIELD_SETTERS, key, "info")
        new_value = coerce_value(adapter, key, value)

        with store_errors("update site info", info_id=info_id, key=key):
            info = await db.get(Info, record_id)
            if info is None:
                raise NotFoundError(resource="info", resource_id=info_id)
            setattr(info, attribute, new_value)
            await db.flush()
        logger.info("Info %s: %s updated", info_id, key)
        return InfoResponse.model_validate(info)


info_service = InfoService()
