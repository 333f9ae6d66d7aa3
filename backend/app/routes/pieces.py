"""
Portfolio API — Piece Route Handlers
=====================================

What:  Every /api/piece* endpoint: lookups, listings and updates of
       portfolio pieces.
How:   Each handler borrows a pooled session, makes one PieceService call
       and returns its result. Errors are formatted by the global handlers
       in main.py.

Route Inventory:
    GET    /api/piece/{name}                        one piece by name (or null)
    GET    /api/piece/id/{piece_id}                 one piece by id (or null)
    GET    /api/pieces                              all pieces
    GET    /api/pieces/category/{category}          pieces in a category
    GET    /api/piece-keys                          piece attribute names
    GET    /api/featured-pieces                     featured pieces
    POST   /api/pieces/add-piece                    new piece with only a name
    POST   /api/pieces/{name}/featured              set the featured flag
    POST   /api/pieces/{title}/update-piece         replace all attributes
    POST   /api/pieces/{piece_id}/{key}/update-piece  set one attribute
    DELETE /api/pieces/delete-piece                 delete by name
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.photo import ErrorResponse
from app.schemas.piece import (
    FeaturedUpdate,
    FieldUpdate,
    PieceCreate,
    PieceDelete,
    PieceReplace,
    PieceResponse,
)
from app.services.piece_service import piece_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Pieces"])

_mutation_errors = {
    400: {"description": "Invalid id, field or value", "model": ErrorResponse},
    404: {"description": "Piece not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


# ══════════════════════════════════════════════════════════════════════════
# Reads
# ══════════════════════════════════════════════════════════════════════════


@router.get(
    "/piece/{name}",
    response_model=Optional[PieceResponse],
    summary="Get a piece by name",
    description="Returns the piece with this name, or null when there is none.",
)
async def get_piece(
    name: str, db: AsyncSession = Depends(get_db_session)
) -> Optional[PieceResponse]:
    return await piece_service.get_by_name(db, name)


@router.get(
    "/piece/id/{piece_id}",
    response_model=Optional[PieceResponse],
    responses={400: {"description": "Malformed id", "model": ErrorResponse}},
    summary="Get a piece by id",
)
async def get_piece_by_id(
    piece_id: str, db: AsyncSession = Depends(get_db_session)
) -> Optional[PieceResponse]:
    return await piece_service.get_by_id(db, piece_id)


@router.get("/pieces", response_model=List[PieceResponse], summary="List all pieces")
async def list_pieces(db: AsyncSession = Depends(get_db_session)) -> List[PieceResponse]:
    return await piece_service.list_all(db)


@router.get(
    "/pieces/category/{category}",
    response_model=List[PieceResponse],
    summary="List pieces in a category",
    description=(
        "The path segment is camelCase and is title-cased before matching, "
        "so /pieces/category/homeDecor returns pieces in 'Home Decor'."
    ),
)
async def list_pieces_by_category(
    category: str, db: AsyncSession = Depends(get_db_session)
) -> List[PieceResponse]:
    return await piece_service.list_by_category(db, category)


@router.get("/piece-keys", response_model=List[str], summary="List piece attribute names")
async def get_piece_keys() -> List[str]:
    return piece_service.keys()


@router.get(
    "/featured-pieces", response_model=List[PieceResponse], summary="List featured pieces"
)
async def list_featured_pieces(
    db: AsyncSession = Depends(get_db_session),
) -> List[PieceResponse]:
    return await piece_service.list_featured(db)


# ══════════════════════════════════════════════════════════════════════════
# Writes
# ══════════════════════════════════════════════════════════════════════════


@router.post(
    "/pieces/add-piece",
    response_model=PieceResponse,
    summary="Add a piece",
    description="Creates a piece with only its name set; other attributes start as null.",
)
async def add_piece(
    body: PieceCreate, db: AsyncSession = Depends(get_db_session)
) -> PieceResponse:
    return await piece_service.add(db, body.name)


@router.post(
    "/pieces/{name}/featured",
    response_model=PieceResponse,
    responses=_mutation_errors,
    summary="Set the featured flag",
)
async def set_featured(
    name: str, body: FeaturedUpdate, db: AsyncSession = Depends(get_db_session)
) -> PieceResponse:
    return await piece_service.set_featured(db, name, body.text)


@router.post(
    "/pieces/{title}/update-piece",
    response_model=PieceResponse,
    responses=_mutation_errors,
    summary="Replace a piece",
    description="Overwrites every attribute of the piece with this title; omitted attributes become null.",
)
async def replace_piece(
    title: str, body: PieceReplace, db: AsyncSession = Depends(get_db_session)
) -> PieceResponse:
    return await piece_service.replace_by_title(db, title, body)


@router.post(
    "/pieces/{piece_id}/{key}/update-piece",
    response_model=PieceResponse,
    responses=_mutation_errors,
    summary="Update one attribute of a piece",
    description=(
        "`key` must be one of the names returned by /api/piece-keys (except id); "
        "the body's `value` is validated against that attribute's type."
    ),
)
async def update_piece_field(
    piece_id: str,
    key: str,
    body: FieldUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PieceResponse:
    return await piece_service.update_field(db, piece_id, key, body.value)


@router.delete(
    "/pieces/delete-piece",
    response_model=str,
    responses={404: {"description": "No piece with that name", "model": ErrorResponse}},
    summary="Delete pieces by name",
)
async def delete_piece(
    body: PieceDelete, db: AsyncSession = Depends(get_db_session)
) -> str:
    return await piece_service.delete_by_name(db, body.name)
