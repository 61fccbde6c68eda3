"""
stickerverse/schemas/cart.py - Pydantic models for the (never persisted) cart projection.
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class _CartLineBase(BaseModel):
    id: str = Field(..., description="Line id (client generated)")
    name: str = Field(..., description="Display name")
    price: float = Field(..., ge=0, description="Unit price as shown to the user")
    quantity: int = Field(..., ge=0, description="Quantity; zero drops the line")
    image_url: Optional[str] = None


class StickerCartLine(_CartLineBase):
    type: Literal["sticker"] = "sticker"
    sticker_id: str = Field(..., description="Catalog item id")
    material: Optional[str] = None


class CustomCartLine(_CartLineBase):
    type: Literal["custom"] = "custom"
    original_image_url: str = Field(..., description="Uploaded design reference")
    material: str
    notes: Optional[str] = None


CartLine = Annotated[Union[StickerCartLine, CustomCartLine], Field(discriminator="type")]


class CartQuoteRequest(BaseModel):
    items: List[CartLine] = Field(default_factory=list)


class CartQuote(BaseModel):
    items: List[CartLine]
    removed: List[str] = Field(default_factory=list, description="Line ids dropped during reconciliation")
    adjusted: List[str] = Field(default_factory=list, description="Line ids whose price or quantity changed")
    subtotal: float
    checkout_enabled: bool


class RecommendationRequest(BaseModel):
    cart_items: List[str] = Field(default_factory=list, description="Names of the stickers in the cart")


class RecommendationOut(BaseModel):
    recommendations: List[str] = Field(default_factory=list)
