"""
stickerverse/services/cart.py - Cart projection helpers.

The cart lives in the client only. These functions treat the client's list as a local
projection: edits are pure list transforms, and `reconcile` re-reads the catalog so that
prices and stock always come from the store, never from the projection.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from stickerverse.schemas.cart import CartLine, CartQuote, StickerCartLine

logger = logging.getLogger("stickerverse.cart")


def set_quantity(lines: List[CartLine], line_id: str, quantity: int) -> List[CartLine]:
    """Quantity is clamped at zero; a zero quantity drops the line."""
    out: List[CartLine] = []
    for line in lines:
        if line.id == line_id:
            line = line.model_copy(update={"quantity": max(0, quantity)})
        if line.quantity > 0:
            out.append(line)
    return out


def remove_line(lines: List[CartLine], line_id: str) -> List[CartLine]:
    return [line for line in lines if line.id != line_id]


def subtotal(lines: List[CartLine]) -> float:
    total = sum((Decimal(str(line.price)) * line.quantity for line in lines), Decimal("0"))
    return float(total.quantize(Decimal("0.01")))


def reconcile(lines: List[CartLine], store) -> Tuple[List[CartLine], List[str], List[str]]:
    """
    Returns (lines, removed_ids, adjusted_ids).
    - catalog lines whose sticker no longer exists are removed,
    - name and price come from the catalog,
    - quantity is clamped to stock (no stock -> removed).
    Custom lines are kept as they are.
    """
    removed: List[str] = []
    adjusted: List[str] = []
    out = [line for line in lines if line.quantity > 0]
    removed.extend(line.id for line in lines if line.quantity <= 0)

    for line in list(out):
        if not isinstance(line, StickerCartLine):
            continue
        item: Optional[dict] = store.get(f"stickers/{line.sticker_id}")
        if item is None:
            out = remove_line(out, line.id)
            removed.append(line.id)
            continue

        price = float(item.get("price", 0) or 0)
        name = item.get("name") or line.name
        stock = int(item.get("stock", 0) or 0)
        if price != line.price or name != line.name:
            out = [
                other.model_copy(update={"price": price, "name": name}) if other.id == line.id else other
                for other in out
            ]
            adjusted.append(line.id)
        if line.quantity > stock:
            out = set_quantity(out, line.id, stock)
            if stock <= 0:
                removed.append(line.id)
                adjusted = [a for a in adjusted if a != line.id]
            elif line.id not in adjusted:
                adjusted.append(line.id)

    if removed or adjusted:
        logger.debug("Cart reconciled: removed=%s adjusted=%s", removed, adjusted)
    return out, removed, adjusted


def quote(lines: List[CartLine], store, signed_in: bool) -> CartQuote:
    items, removed, adjusted = reconcile(lines, store)
    return CartQuote(
        items=items,
        removed=removed,
        adjusted=adjusted,
        subtotal=subtotal(items),
        checkout_enabled=signed_in,
    )
