# stickerverse/schemas/order.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from stickerverse.schemas.user import Address

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]

# Statuses still waiting to leave the warehouse
OPEN_STATUSES = ("pending", "processing")


class OrderItem(BaseModel):
    id: str
    name: str
    price: float
    quantity: int = 1
    image_url: Optional[str] = None


class OrderOut(BaseModel):
    """Orders are read-only here; their lifecycle is handled elsewhere."""
    id: str
    user_id: str
    items: List[OrderItem] = Field(default_factory=list)
    total_amount: float = 0.0
    shipping_address: Optional[Address] = None
    status: OrderStatus = "pending"
    order_date: Optional[datetime] = None
