"""
Portfolio API — Info Schemas
=============================

What:  Response model and updatable-field allow-list for site info records.
"""

import uuid
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, TypeAdapter


class InfoResponse(BaseModel):
    id: uuid.UUID
    title: Optional[str] = None
    tagline: Optional[str] = None
    about: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None

    model_config = {"from_attributes": True}


class InfoField(str, Enum):
    """Wire names of the info attributes that may be set individually."""
    TITLE = "title"
    TAGLINE = "tagline"
    ABOUT = "about"
    EMAIL = "email"
    PHONE = "phone"
    LOCATION = "location"


_optional_str = TypeAdapter(Optional[str])

INFO_FIELD_SETTERS: Dict[InfoField, Tuple[str, TypeAdapter]] = {
    field: (field.value, _optional_str) for field in InfoField
}
