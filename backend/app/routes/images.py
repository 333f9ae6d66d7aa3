"""
Portfolio API — Image Route Handlers
=====================================

What:  Image upload, metadata listing, deletion, and serving stored files.

Request Flow (POST /api/upload):
    1. Client sends multipart/form-data with one or more `file` fields
    2. Each part is read into memory (bounded by size validation)
    3. PhotoService validates, stores and records every file
    4. Response is the list of generated filenames; each is then served at
       /images/<filename>
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import NotFoundError
from app.schemas.photo import ErrorResponse, PhotoResponse
from app.services.file_service import file_service
from app.services.photo_service import IncomingFile, photo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Images"])

# Serves stored files at the public image path (default /images/<name>)
static_router = APIRouter(prefix=settings.public_image_path, tags=["Images"])


@router.post(
    "/upload",
    response_model=List[str],
    responses={
        400: {"description": "Unsupported type, empty or oversized file", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Upload images",
    description="Accepts one or more `file` parts and returns the generated filenames.",
)
async def upload_images(
    file: List[UploadFile] = File(..., description="Image files (PNG, JPEG, GIF, WebP)"),
    db: AsyncSession = Depends(get_db_session),
) -> List[str]:
    incoming: List[IncomingFile] = []
    try:
        for part in file:
            content = await part.read()
            incoming.append(
                IncomingFile(
                    filename=part.filename or "upload.jpg",
                    content=content,
                    content_type=part.content_type,
                    content_length=part.size,
                )
            )
    finally:
        for part in file:
            await part.close()

    logger.info(
        "Received upload: %d file(s), %d bytes",
        len(incoming),
        sum(len(f.content) for f in incoming),
    )
    return await photo_service.upload(db, incoming)


@router.get("/photos", response_model=List[PhotoResponse], summary="List stored images")
async def list_photos(db: AsyncSession = Depends(get_db_session)) -> List[PhotoResponse]:
    return await photo_service.list_all(db)


@router.delete(
    "/images/{image}/delete-image",
    response_model=str,
    responses={
        400: {"description": "Invalid image name", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
    },
    summary="Delete an image",
)
async def delete_image(image: str, db: AsyncSession = Depends(get_db_session)) -> str:
    return await photo_service.delete(db, image)


@static_router.get(
    "/{filename}",
    summary="Serve a stored image",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found"},
    },
)
async def serve_image(filename: str) -> FileResponse:
    path = file_service.resolve_path(filename)
    if not path.is_file():
        raise NotFoundError(resource="image", resource_id=filename)

    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
