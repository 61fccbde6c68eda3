"""
stickerverse/integrations/ai_helpers.py - AI completion endpoint (Gemini) integration.

Two stateless request/response helpers:

- `check_image_resolution(image_data_uri, min_width, min_height)`: the model reports the pixel
  size of the image; the comparison against the minimum and the message are computed here.
  Any transport or parse failure fails closed (`is_resolution_met=False`).
- `recommend_stickers(cart_items)`: sticker names/descriptions related to the cart. An empty
  cart makes no call; any failure yields an empty list.

Both go through `generate_json`, a single `generateContent` call in JSON mode with a response
schema. No retries.
"""
import json
import logging
import re
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from stickerverse.config import settings
from stickerverse.schemas.ai import ResolutionCheckResult

logger = logging.getLogger("stickerverse.ai")

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)

RESOLUTION_PROMPT = """You are an AI assistant that checks if an image meets the minimum resolution requirements for printing.

Analyze the attached image and determine its width and height in pixels.

Minimum width: {min_width} pixels
Minimum height: {min_height} pixels

Return a JSON object with the fields width and height (integers, pixels)."""

RESOLUTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "width": {"type": "INTEGER"},
        "height": {"type": "INTEGER"},
    },
    "required": ["width", "height"],
}

RECOMMEND_PROMPT = """You are a sticker recommendation expert.

Based on the stickers currently in the user's cart, recommend other stickers that the user might like.
Return an array of sticker names/descriptions.

Current cart items: {items}"""

RECOMMEND_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["recommendations"],
}


class AIHelperError(Exception):
    """Transport, configuration or parse failure of a completion call."""


async def get_ai_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """FastAPI dependency: one HTTP client per request."""
    async with httpx.AsyncClient(timeout=settings.ai_timeout_seconds) as client:
        yield client


def parse_data_uri(image_data_uri: str) -> Dict[str, str]:
    m = DATA_URI_PATTERN.match(image_data_uri or "")
    if not m or not m.group("mime").startswith("image/"):
        raise AIHelperError("Expected an image data URI: data:<mimetype>;base64,<encoded_data>")
    return {"mime_type": m.group("mime"), "data": m.group("data")}


async def generate_json(
    parts: List[Dict[str, Any]],
    schema: Dict[str, Any],
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    if not settings.gemini_api_key:
        raise AIHelperError("GEMINI_API_KEY is not configured")

    url = f"{settings.gemini_base_url.rstrip('/')}/models/{settings.gemini_model}:generateContent"
    payload = {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {"responseMimeType": "application/json", "responseSchema": schema},
    }
    headers = {"x-goog-api-key": settings.gemini_api_key}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.ai_timeout_seconds) as own:
                resp = await own.post(url, json=payload, headers=headers)
        else:
            resp = await client.post(url, json=payload, headers=headers)
        resp.raise_for_status()
        body = resp.json()
        text = body["candidates"][0]["content"]["parts"][0]["text"]
        out = json.loads(text)
    except httpx.HTTPError as exc:
        raise AIHelperError(f"Completion request failed: {exc}") from exc
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise AIHelperError(f"Unexpected completion response: {exc}") from exc
    if not isinstance(out, dict):
        raise AIHelperError("Completion response is not a JSON object")
    return out


def describe_resolution(width: int, height: int, min_width: int, min_height: int) -> ResolutionCheckResult:
    shortfalls = []
    if width < min_width:
        shortfalls.append(f"width is {min_width - width}px short of {min_width}px")
    if height < min_height:
        shortfalls.append(f"height is {min_height - height}px short of {min_height}px")
    if shortfalls:
        message = f"Image is {width}x{height}px; " + " and ".join(shortfalls) + "."
    else:
        message = f"Image meets the minimum resolution of {min_width}x{min_height}px."
    return ResolutionCheckResult(
        is_resolution_met=not shortfalls,
        width=width,
        height=height,
        message=message,
    )


async def check_image_resolution(
    image_data_uri: str,
    min_width: int,
    min_height: int,
    client: Optional[httpx.AsyncClient] = None,
) -> ResolutionCheckResult:
    try:
        inline = parse_data_uri(image_data_uri)
        out = await generate_json(
            [
                {"text": RESOLUTION_PROMPT.format(min_width=min_width, min_height=min_height)},
                {"inline_data": inline},
            ],
            RESOLUTION_SCHEMA,
            client,
        )
        width, height = int(out["width"]), int(out["height"])
    except (AIHelperError, KeyError, TypeError, ValueError, OverflowError) as exc:
        logger.warning("Resolution check failed: %s", exc)
        return ResolutionCheckResult(
            is_resolution_met=False,
            width=0,
            height=0,
            message="Could not check image resolution.",
        )
    return describe_resolution(width, height, min_width, min_height)


async def recommend_stickers(
    cart_items: List[str],
    client: Optional[httpx.AsyncClient] = None,
) -> List[str]:
    names = [n.strip() for n in cart_items if n and n.strip()]
    if not names:
        return []
    try:
        out = await generate_json(
            [{"text": RECOMMEND_PROMPT.format(items=", ".join(names))}],
            RECOMMEND_SCHEMA,
            client,
        )
    except AIHelperError as exc:
        logger.warning("Recommendation call failed: %s", exc)
        return []
    recs = out.get("recommendations")
    if not isinstance(recs, list):
        logger.warning("Recommendation response without a list: %r", out)
        return []
    return [str(r) for r in recs if str(r).strip()]
