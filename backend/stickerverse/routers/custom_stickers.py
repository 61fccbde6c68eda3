"""
# `stickerverse/routers/custom_stickers.py` - Custom sticker upload

### `POST /custom-stickers/resolution-check`
Multipart upload (`image`). The file must be an image; it is read into a base64 data URI
and sent to the resolution check with the configured minimum size. Returns
`{is_resolution_met, width, height, message}`. The check fails closed, so a broken AI call
reads as "not met".

### `POST /custom-stickers`
Multipart form:
- `image` (file)
- `material_id`: one of `GET /stickers/materials`
- `quantity`: 1..100
- `notes` (optional)

Runs the resolution check again and, when it is met, returns a `custom` cart line for the
client to put in its cart. Nothing is persisted. `422` with reason `resolution-not-met`
otherwise.
"""
import base64
import logging
import uuid
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from stickerverse.config import settings
from stickerverse.integrations.ai_helpers import check_image_resolution, get_ai_http_client
from stickerverse.schemas.ai import ResolutionCheckResult
from stickerverse.schemas.cart import CustomCartLine
from stickerverse.schemas.sticker import MATERIAL_IDS

logger = logging.getLogger("stickerverse.ai")

router = APIRouter(prefix="/custom-stickers", tags=["Custom Stickers"])


async def _read_data_uri(image: UploadFile) -> str:
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Please upload an image file.")
    # one byte past the limit is enough to know it is too large
    raw = await image.read(settings.custom_sticker_max_bytes + 1)
    if not raw:
        raise HTTPException(status_code=400, detail="The uploaded file is empty.")
    if len(raw) > settings.custom_sticker_max_bytes:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Image is too large.")
    encoded = base64.b64encode(raw).decode("ascii")
    return f"data:{image.content_type};base64,{encoded}"


async def _check(data_uri: str, client: httpx.AsyncClient) -> ResolutionCheckResult:
    return await check_image_resolution(
        data_uri,
        settings.custom_sticker_min_width,
        settings.custom_sticker_min_height,
        client=client,
    )


@router.post("/resolution-check", response_model=ResolutionCheckResult, summary="Check image resolution")
async def resolution_check(
    image: UploadFile = File(...),
    client: httpx.AsyncClient = Depends(get_ai_http_client),
):
    data_uri = await _read_data_uri(image)
    return await _check(data_uri, client)


@router.post("", response_model=CustomCartLine, summary="Build a custom sticker cart line")
async def create_custom_sticker(
    image: UploadFile = File(...),
    material_id: str = Form(..., min_length=1),
    quantity: int = Form(1, ge=1, le=100),
    notes: Optional[str] = Form(None),
    client: httpx.AsyncClient = Depends(get_ai_http_client),
):
    if material_id not in MATERIAL_IDS:
        raise HTTPException(status_code=400, detail=f"Unknown material: {material_id}")

    data_uri = await _read_data_uri(image)
    result = await _check(data_uri, client)
    if not result.is_resolution_met:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"reason": "resolution-not-met", "message": result.message},
        )

    name = (image.filename or "").rsplit(".", 1)[0] or "Custom sticker"
    line = CustomCartLine(
        id=f"custom-{uuid.uuid4().hex}",
        name=name,
        price=settings.custom_sticker_unit_price,
        quantity=quantity,
        image_url=data_uri,
        original_image_url=data_uri,
        material=material_id,
        notes=(notes or "").strip() or None,
    )
    logger.info("Custom sticker line %s built (%dx%d, %s x%d)", line.id, result.width, result.height, material_id, quantity)
    return line
