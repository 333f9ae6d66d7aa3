"""
Portfolio API — Photo Service
==============================

What:  Orchestrates image upload (validate → store file → record metadata),
       listing and deletion.
Who:   Called by the handlers in app/routes/images.py.

Upload Flow (POST /api/upload):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐
    │  Files   │───▶│  Validate   │───▶│  Photo rows  │
    │  (Route) │    │  & Store    │    │  (DB flush)  │
    └──────────┘    │ (FileServ)  │    └──────────────┘
                    └─────────────┘

    A batch is all-or-nothing: if any file fails validation or the metadata
    flush fails, files already written for this request are removed and the
    error propagates (the session is rolled back by get_db_session).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, PortfolioError, FileStorageError
from app.models.photo import Photo
from app.schemas.photo import PhotoResponse
from app.services.file_service import file_service
from app.services.store import store_errors

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """One part of a multipart upload, already read into memory."""
    filename: str
    content: bytes
    content_type: Optional[str] = None
    content_length: Optional[int] = None


class PhotoService:
    """
    Upload, listing and deletion of stored images.

    Responsibilities:
        - upload(): validate → store file → record Photo row, per file
        - list_all(): metadata of every stored image with its public URL
        - delete(): remove the file and its metadata row

    Error Handling Strategy:
        Application errors (ValidationError, DatabaseError) propagate as-is. Anything
        else that goes wrong mid-batch is logged and wrapped in
        FileStorageError, after the files already written are removed.
        The disk and the `photos` table are not updated atomically; a
        crash between the write and the commit can leave an orphan file.
    """

    def _to_response(self, photo: Photo) -> PhotoResponse:
        return PhotoResponse(
            id=photo.id,
            filename=photo.filename,
            original_name=photo.original_name,
            content_type=photo.content_type,
            size_bytes=photo.size_bytes,
            url=file_service.public_url(photo.filename),
            created_at=photo.created_at,
        )

    async def upload(self, db: AsyncSession, files: List[IncomingFile]) -> List[str]:
        """
        Store every file and record its metadata.

        Returns:
            Generated filenames, in the order the files were sent.

        Raises:
            ValidationError:  Unsupported type, empty or oversized file (→ 400)
            FileStorageError: Disk write failed (→ 500)
            DatabaseError:    Metadata insert failed (→ 500)
        """
        stored: List[str] = []
        try:
            for incoming in files:
                stored_name, mime_type = await file_service.validate_and_store(
                    filename=incoming.filename,
                    content=incoming.content,
                    content_type=incoming.content_type,
                    content_length=incoming.content_length,
                )
                stored.append(stored_name)
                db.add(
                    Photo(
                        filename=stored_name,
                        original_name=incoming.filename,
                        content_type=mime_type,
                        size_bytes=len(incoming.content),
                    )
                )

            with store_errors("record uploaded images"):
                await db.flush()

        except Exception as e:
            for name in stored:
                await file_service.cleanup_file(str(file_service.resolve_path(name)))
            if isinstance(e, PortfolioError):
                raise
            logger.error("Unexpected error during upload: %s", str(e), exc_info=True)
            raise FileStorageError(
                message="An error occurred while saving your images. Please try again.",
                context={"original_error": type(e).__name__},
            ) from e

        logger.info("Uploaded %d image(s): %s", len(stored), ", ".join(stored))
        return stored

    async def list_all(self, db: AsyncSession) -> List[PhotoResponse]:
        with store_errors("retrieve images"):
            result = await db.execute(select(Photo).order_by(Photo.created_at))
            return [self._to_response(p) for p in result.scalars().all()]

    async def delete(self, db: AsyncSession, image: str) -> str:
        """
        Remove an image from the file store along with its metadata row.

        A missing file with a leftover metadata row still succeeds; only
        when neither exists is the image reported as not found.
        """
        file_service.resolve_path(image)

        with store_errors("delete the image", image=image):
            result = await db.execute(delete(Photo).where(Photo.filename == image))
        had_record = bool(result.rowcount)

        try:
            await file_service.delete_file(image)
        except NotFoundError:
            if not had_record:
                raise
            logger.warning("Image %s had metadata but no file on disk", image)

        return f"{image} has been deleted"


photo_service = PhotoService()
