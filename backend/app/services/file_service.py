"""
Portfolio API — File Storage Service
=====================================

What:  Validates uploaded images, writes them to the file store under a
       generated name, and resolves/deletes stored files.
How:   Checks extension and size, then the content type libmagic detects
       from the file header, and writes the bytes with aiofiles into the
       flat STORAGE_ROOT directory.
Who:   Called by PhotoService (upload/delete) and the image-serving route.

Naming Scheme:
    <epoch milliseconds>-<8 hex chars of a uuid4>-<sanitized original stem><ext>
    e.g. 1718028000123-3f9a1c2b-sunset.jpg

    The timestamp keeps names sortable by upload time; the random fragment
    keeps two uploads of the same file in the same millisecond apart.

Attack vectors handled:
    - Path traversal: stored names never contain separators, and every
      lookup is checked to resolve inside STORAGE_ROOT
    - Non-image uploads: the extension and the type detected from the
      file bytes must both be allowed; the declared type is not trusted
    - Oversized uploads: rejected against MAX_FILE_SIZE
"""

import logging
import os
import re
import time
import uuid
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
import magic

from app.config import settings
from app.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
ALLOWED_CONTENT_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


class FileService:
    """
    Manages the lifecycle of image files in the file store.

    Directory Structure:
        public/images/
        ├── 1718028000123-3f9a1c2b-sunset.jpg
        └── 1718028000456-a07be51d-sunset.jpg
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the configured storage path (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    # ── Validation ────────────────────────────────────────────────────────

    def validate_extension(self, filename: str) -> str:
        """
        Returns the normalized (lowercase) extension.

        Raises:
            ValidationError if the extension is not an allowed image type.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_mime_type(self, content: bytes, filename: str) -> str:
        """
        Detect the real content type from the file's leading bytes.

        What:    libmagic matches the header against known signatures
                 (JPEG starts with FF D8 FF, PNG with 89 50 4E 47).
        Why:     The extension and the part's declared Content-Type are both
                 chosen by the client; only the bytes say what the file is.

        Args:
            content:  Raw bytes of the uploaded file
            filename: Original filename (for error messaging only)

        Returns:
            Detected MIME type string (e.g., "image/jpeg")

        Raises:
            ValidationError if the detected type is not an allowed image type.
            FileStorageError if libmagic itself fails.
        """
        try:
            mime_type = magic.from_buffer(content, mime=True)
        except magic.MagicException as e:
            logger.error("MIME type detection failed for %s: %s", filename, str(e))
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"filename": filename, "error": str(e)},
            ) from e

        if mime_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(
                message=(
                    f"File content type '{mime_type}' is not supported. "
                    f"The file must be a valid image (PNG, JPEG, GIF or WebP)."
                ),
                field="file",
                context={"detected_mime": mime_type, "allowed": list(ALLOWED_CONTENT_TYPES)},
            )
        return mime_type

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Check the declared size first, then the bytes actually received.

        Raises:
            ValidationError for empty files and files over MAX_FILE_SIZE.
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(message="The uploaded file is empty.", field="file")

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) is too large; maximum is {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    # ── Naming & Paths ────────────────────────────────────────────────────

    def generate_filename(self, original_name: str, extension: str) -> str:
        """Build a unique stored name; see the module docstring for the scheme."""
        stem = _UNSAFE_CHARS.sub("-", Path(original_name).stem).strip("-")[:50] or "image"
        timestamp = int(time.time() * 1000)
        return f"{timestamp}-{uuid.uuid4().hex[:8]}-{stem}{extension}"

    def resolve_path(self, filename: str) -> Path:
        """
        Absolute path of a stored file.

        Raises:
            ValidationError if the name contains path components or escapes
            the storage root.
        """
        if not filename or Path(filename).name != filename or filename in {".", ".."}:
            raise ValidationError(message="Invalid image name", field="image")
        path = (self.storage_root / filename).resolve()
        if path.parent != self.storage_root:
            raise ValidationError(message="Invalid image name", field="image")
        return path

    def public_url(self, filename: str) -> str:
        return f"{settings.public_image_path}/{filename}"

    # ── Disk Operations ───────────────────────────────────────────────────

    async def store_file(self, content: bytes, filename: str) -> Path:
        """
        Write validated content to STORAGE_ROOT/filename.

        Raises:
            FileStorageError if the write fails.
        """
        path = self.resolve_path(filename)
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return path

    async def delete_file(self, filename: str) -> None:
        """
        Remove a stored file.

        Raises:
            NotFoundError if no such file exists.
            FileStorageError if the OS refuses the delete.
        """
        path = self.resolve_path(filename)
        if not path.is_file():
            raise NotFoundError(resource="image", resource_id=filename)
        try:
            os.remove(path)
        except OSError as e:
            logger.error("Failed to delete file %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to delete the image. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )
        logger.info("File deleted: %s", filename)

    async def cleanup_file(self, file_path: str) -> None:
        """
        Best-effort removal of a file written earlier in a failed request.

        Missing files are ignored and OS errors are logged, never raised.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        content_length: Optional[int] = None,
    ) -> Tuple[str, str]:
        """
        Complete validation and storage pipeline for one upload.

        Pipeline:
            1. Extension check (fast rejection of obvious non-images)
            2. Size check (declared, then actual)
            3. MIME detection from the content bytes
            4. Unique name generation and async write

        The declared `content_type` is only compared against the detected
        type for logging; it never decides whether a file is accepted.

        Returns:
            (stored filename, detected content type)
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        mime_type = self.validate_mime_type(content, filename)
        if content_type and content_type.split(";")[0].strip().lower() != mime_type:
            logger.info(
                "Declared type %s for %s differs from detected %s",
                content_type, filename, mime_type,
            )

        stored_name = self.generate_filename(filename, ext)
        await self.store_file(content, stored_name)
        return stored_name, mime_type


file_service = FileService()
