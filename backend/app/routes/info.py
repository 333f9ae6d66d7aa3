"""
Portfolio API — Info Route Handlers
====================================

What:  GET /api/info, POST /api/info/add-info and the single-field update
       for site info records.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.info import InfoResponse
from app.schemas.photo import ErrorResponse
from app.schemas.piece import FieldUpdate
from app.services.info_service import info_service

router = APIRouter(prefix="/api", tags=["Info"])


@router.get("/info", response_model=List[InfoResponse], summary="List site info records")
async def list_info(db: AsyncSession = Depends(get_db_session)) -> List[InfoResponse]:
    return await info_service.list_all(db)


@router.post("/info/add-info", response_model=InfoResponse, summary="Add an empty info record")
async def add_info(db: AsyncSession = Depends(get_db_session)) -> InfoResponse:
    return await info_service.add(db)


@router.post(
    "/info/{info_id}/{key}/update-piece",
    response_model=InfoResponse,
    responses={
        400: {"description": "Invalid id, field or value", "model": ErrorResponse},
        404: {"description": "Info record not found", "model": ErrorResponse},
    },
    summary="Update one attribute of an info record",
)
async def update_info_field(
    info_id: str,
    key: str,
    body: FieldUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> InfoResponse:
    # The path keeps the "update-piece" suffix the frontend already calls.
    return await info_service.update_field(db, info_id, key, body.value)
