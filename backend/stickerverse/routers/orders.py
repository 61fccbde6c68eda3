# stickerverse/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from stickerverse.core.security import get_store, require_admin_view
from stickerverse.schemas.order import OrderOut, OrderStatus
from stickerverse.schemas.principal import Session

# Orders are written by checkout, which lives outside this service; admins only read them here.
admin_router = APIRouter(prefix="/orders", tags=["Admin: Orders"])


@admin_router.get("", response_model=List[OrderOut], summary="List orders")
def list_orders(
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    _: Session = Depends(require_admin_view),
    store=Depends(get_store),
):
    """All orders, newest first."""
    where = [("status", "==", status)] if status else []
    docs = store.query("orders", where=where, order_by="order_date", descending=True)
    return [OrderOut(**d) for d in docs]
