"""
# `stickerverse/schemas/sticker.py` - Catalog schemas

| Field               | Type        | Required | Notes |
|---------------------|-------------|----------|-------|
| name                | `str`       | yes      | at least 3 characters |
| description         | `str`       | yes      | at least 10 characters |
| price               | `float`     | yes      | >= 0 |
| stock               | `int`       | yes      | >= 0 |
| category            | `str`       | no       | |
| tags                | `list[str]` | no       | trimmed, empty tags dropped |
| image_urls          | `list[str]` | no       | media references |
| video_urls          | `list[str]` | no       | media references |
| available_materials | `list[str]` | yes      | non-empty, ids from `STICKER_MATERIALS` |

`StickerUpdate` has the same fields, all optional; only the fields sent are written.
"""
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field


class MaterialOption(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


STICKER_MATERIALS: List[MaterialOption] = [
    MaterialOption(id="vinyl-glossy", name="Glossy Vinyl", description="Shiny, waterproof finish"),
    MaterialOption(id="vinyl-matte", name="Matte Vinyl", description="Smooth, glare-free finish"),
    MaterialOption(id="holographic", name="Holographic", description="Rainbow shimmer"),
    MaterialOption(id="transparent", name="Transparent", description="Clear background"),
    MaterialOption(id="paper", name="Paper", description="Classic indoor sticker"),
]
MATERIAL_IDS = {m.id for m in STICKER_MATERIALS}


def _clean_materials(v: List[str]) -> List[str]:
    seen: List[str] = []
    for m in v:
        m = (m or "").strip()
        if m not in MATERIAL_IDS:
            raise ValueError(f"Unknown material: {m!r}")
        if m not in seen:
            seen.append(m)
    if not seen:
        raise ValueError("At least one material must be selected.")
    return seen


def _clean_tags(v: List[str]) -> List[str]:
    return [t.strip() for t in v if t and t.strip()]


MaterialIds = Annotated[List[str], AfterValidator(_clean_materials)]
Tags = Annotated[List[str], AfterValidator(_clean_tags)]


class StickerCreate(BaseModel):
    name: str = Field(..., min_length=3, description="Sticker name")
    description: str = Field(..., min_length=10, description="Detailed description")
    price: float = Field(..., ge=0, description="Unit price")
    stock: int = Field(..., ge=0, description="Quantity in stock")
    category: str = Field("", description="Category")
    tags: Tags = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)
    video_urls: List[str] = Field(default_factory=list)
    available_materials: MaterialIds = Field(..., description="Material option ids")


class StickerUpdate(BaseModel):
    """Partial update; fields left out are not touched."""
    name: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    tags: Optional[Tags] = None
    image_urls: Optional[List[str]] = None
    video_urls: Optional[List[str]] = None
    available_materials: Optional[MaterialIds] = None


class StickerOut(BaseModel):
    id: str
    name: str
    description: str = ""
    price: float
    stock: int = 0
    category: str = ""
    tags: List[str] = []
    image_urls: List[str] = []
    video_urls: List[str] = []
    available_materials: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StickerCreated(BaseModel):
    id: str
