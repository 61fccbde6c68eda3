"""
Admin Dashboard Router
Overview numbers for the admin panel landing page
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from stickerverse.core.security import get_store, require_admin_view
from stickerverse.schemas.order import OPEN_STATUSES
from stickerverse.schemas.principal import Session

# Stock at or below this counts as "low"
LOW_STOCK_THRESHOLD = 10

router = APIRouter(tags=["Admin: Dashboard"])


@router.get("/dashboard/stats")
def get_dashboard_stats(
    _: Session = Depends(require_admin_view),
    store=Depends(get_store),
) -> Dict[str, Any]:
    """
    Revenue counts every order that was not cancelled.
    Pending shipments are orders that have not left the warehouse yet.
    """
    stats = {
        "total_revenue": 0.0,
        "total_orders": 0,
        "total_users": 0,
        "total_stickers": 0,
        "pending_shipments": 0,
        "low_stock": 0,
    }

    for order in store.query("orders"):
        stats["total_orders"] += 1
        status = order.get("status", "pending")
        if status != "cancelled":
            stats["total_revenue"] += float(order.get("total_amount", 0) or 0)
        if status in OPEN_STATUSES:
            stats["pending_shipments"] += 1

    stats["total_users"] = len(store.query("users"))

    for sticker in store.query("stickers"):
        stats["total_stickers"] += 1
        if int(sticker.get("stock", 0) or 0) <= LOW_STOCK_THRESHOLD:
            stats["low_stock"] += 1

    stats["total_revenue"] = round(stats["total_revenue"], 2)
    return stats
