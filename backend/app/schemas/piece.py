"""
Portfolio API — Piece Request/Response Schemas
===============================================

What:  Pydantic models for the piece endpoints plus the allow-list of
       fields that may be updated one at a time.
How:   Wire names are camelCase (`shortDescription`), ORM attributes are
       snake_case (`short_description`). Every model accepts either.
"""

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, TypeAdapter


class PieceResponse(BaseModel):
    """
    What:  Full representation of a portfolio piece.
    Who:   Returned by every piece lookup and mutation endpoint.

    Every attribute except `id` may be null: a freshly added piece only has
    its name.
    """
    id: uuid.UUID = Field(description="Store-assigned identifier")
    name: Optional[str] = Field(default=None, description="Lookup name")
    title: Optional[str] = Field(default=None, description="Display title")
    images: Optional[List[str]] = Field(default=None, description="Image filenames")
    alt: Optional[str] = Field(default=None, description="Alt text for the images")
    short_description: Optional[str] = Field(default=None, alias="shortDescription")
    long_description: Optional[str] = Field(default=None, alias="longDescription")
    features: Optional[List[str]] = Field(default=None, description="Feature bullet points")
    featured: Optional[bool] = Field(default=None, description="Shown on the landing page")
    category: Optional[str] = Field(default=None, description="Title-cased category name")

    model_config = {"from_attributes": True, "populate_by_name": True}


class PieceCreate(BaseModel):
    """Body of POST /api/pieces/add-piece."""
    name: str = Field(min_length=1, max_length=255, description="Name of the new piece")


class PieceReplace(BaseModel):
    """
    Body of POST /api/pieces/{title}/update-piece.

    Replaces every attribute of the matched piece; omitted attributes are
    cleared to null.
    """
    name: Optional[str] = None
    title: Optional[str] = None
    images: Optional[List[str]] = None
    alt: Optional[str] = None
    short_description: Optional[str] = Field(default=None, alias="shortDescription")
    long_description: Optional[str] = Field(default=None, alias="longDescription")
    features: Optional[List[str]] = None
    featured: Optional[bool] = None
    category: Optional[str] = None

    model_config = {"populate_by_name": True}


class FeaturedUpdate(BaseModel):
    """Body of POST /api/pieces/{name}/featured."""
    text: bool = Field(description="New value of the featured flag")


class FieldUpdate(BaseModel):
    """Body of the single-field update endpoints; `value` is typed per field."""
    value: Any = Field(default=None, description="New value for the field named in the URL")


class PieceDelete(BaseModel):
    """Body of DELETE /api/pieces/delete-piece."""
    name: str = Field(min_length=1, description="Every piece with this name is removed")


# ══════════════════════════════════════════════════════════════════════════
# Updatable Fields
# ══════════════════════════════════════════════════════════════════════════


class PieceField(str, Enum):
    """Wire names of the piece attributes that may be set individually."""
    NAME = "name"
    TITLE = "title"
    IMAGES = "images"
    ALT = "alt"
    SHORT_DESCRIPTION = "shortDescription"
    LONG_DESCRIPTION = "longDescription"
    FEATURES = "features"
    FEATURED = "featured"
    CATEGORY = "category"


_optional_str = TypeAdapter(Optional[str])
_optional_str_list = TypeAdapter(Optional[List[str]])
_optional_bool = TypeAdapter(Optional[bool])

# field → (ORM attribute, value validator)
PIECE_FIELD_SETTERS: Dict[PieceField, Tuple[str, TypeAdapter]] = {
    PieceField.NAME: ("name", _optional_str),
    PieceField.TITLE: ("title", _optional_str),
    PieceField.IMAGES: ("images", _optional_str_list),
    PieceField.ALT: ("alt", _optional_str),
    PieceField.SHORT_DESCRIPTION: ("short_description", _optional_str),
    PieceField.LONG_DESCRIPTION: ("long_description", _optional_str),
    PieceField.FEATURES: ("features", _optional_str_list),
    PieceField.FEATURED: ("featured", _optional_bool),
    PieceField.CATEGORY: ("category", _optional_str),
}

# Column headers for the admin table, in display order.
PIECE_KEYS: List[str] = ["id"] + [field.value for field in PieceField]
