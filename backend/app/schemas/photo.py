"""
Portfolio API — Photo and Shared Schemas
=========================================

What:  Image metadata responses, plus the error and health models shared by
       every route module.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PhotoResponse(BaseModel):
    """
    What:  Metadata for one stored image.
    Who:   Returned by GET /api/photos.
    """
    id: uuid.UUID = Field(description="Metadata record identifier")
    filename: str = Field(description="Generated name in the file store")
    original_name: str = Field(alias="originalName", description="Name sent by the client")
    content_type: str = Field(alias="contentType", description="Declared MIME type")
    size_bytes: int = Field(alias="size", description="Size in bytes")
    url: str = Field(description="Public path the image is served from")
    created_at: datetime = Field(alias="createdAt", description="Upload time (UTC)")

    model_config = {"from_attributes": True, "populate_by_name": True}


# ══════════════════════════════════════════════════════════════════════════
# Shared Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body returned by every exception handler.

    Example:
        {
            "error": "not_found",
            "message": "piece 'abc' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
