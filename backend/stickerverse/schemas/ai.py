# stickerverse/schemas/ai.py
from pydantic import BaseModel, Field


class ResolutionCheckResult(BaseModel):
    is_resolution_met: bool = Field(..., description="Whether the image meets the minimum resolution")
    width: int = Field(0, description="Detected width in pixels")
    height: int = Field(0, description="Detected height in pixels")
    message: str = Field(..., description="Human-readable outcome")
