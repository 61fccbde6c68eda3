"""
# `stickerverse/routers/carts.py` - Cart projection

The cart itself lives on the client and is never persisted. These endpoints reconcile the
client's projection with the catalog and serve the "you might also like" list.

### `POST /cart/quote`
Body: `{"items": [CartLine, ...]}`. Catalog lines are re-priced from the store, clamped to
stock or dropped when the sticker is gone. Custom lines pass through. Returns the
reconciled lines, the ids removed or adjusted, the subtotal and whether checkout is enabled
(signed-in callers only).

### `GET /cart/checkout-enabled`
`{"checkout_enabled": bool}` for the caller.

### `POST /cart/recommendations`
Body: `{"cart_items": ["Cat sticker", ...]}`. Debounced per caller: a newer cart supersedes
an in-flight call and the superseded request answers with the newer result. An empty cart
returns `[]` without calling the model; failures also return `[]`.

The caller is the signed-in principal. Anonymous visitors should send a random
`X-Cart-Session` header; without it only requests for the identical cart are joined.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Request

from stickerverse.core.security import get_optional_session, get_store
from stickerverse.schemas.cart import CartQuote, CartQuoteRequest, RecommendationOut, RecommendationRequest
from stickerverse.schemas.principal import Session
from stickerverse.services import cart as cart_service
from stickerverse.services.recommendations import RecommendationDebouncer, cart_digest, get_recommender

router = APIRouter(prefix="/cart", tags=["Cart"])


def _owner_key(request: Request, session: Optional[Session], cart_session: Optional[str], names: List[str]) -> str:
    if session is not None:
        return session.principal.uid
    if cart_session:
        return f"anon:{cart_session}"
    # No client id: visitors behind one address only share a call for the same cart
    host = request.client.host if request.client else "unknown"
    return f"anon:{host}:{cart_digest(names)}"


@router.post("/quote", response_model=CartQuote)
def quote_cart(
    body: CartQuoteRequest,
    session: Optional[Session] = Depends(get_optional_session),
    store=Depends(get_store),
):
    return cart_service.quote(body.items, store, signed_in=session is not None)


@router.get("/checkout-enabled")
def checkout_enabled(session: Optional[Session] = Depends(get_optional_session)):
    return {"checkout_enabled": session is not None}


@router.post("/recommendations", response_model=RecommendationOut)
async def cart_recommendations(
    body: RecommendationRequest,
    request: Request,
    session: Optional[Session] = Depends(get_optional_session),
    x_cart_session: Optional[str] = Header(None, max_length=128, description="Client-generated cart id for anonymous visitors"),
    recommender: RecommendationDebouncer = Depends(get_recommender),
):
    owner = _owner_key(request, session, x_cart_session, body.cart_items)
    recs = await recommender.recommend(owner, body.cart_items)
    return RecommendationOut(recommendations=recs)
