from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from models.cart import KitchenStatus
from schemas.cart import SplitOut


# Output schema for a confirmed order line
class OrderItemOut(BaseModel):
    id: int
    session_id: int
    table_number: Optional[int] = None
    diner_name: str
    menu_item_id: int
    name: str
    quantity: int
    unit_price: float
    line_total: float
    notes: Optional[str] = None
    is_takeaway: bool
    customizations: List[str]
    kitchen_status: Optional[KitchenStatus] = None
    confirmed_at: Optional[datetime] = None
    split: Optional[SplitOut] = None


# Response schema for cart confirmation and session order lists
class OrdersOut(BaseModel):
    session_id: int
    items: List[OrderItemOut]


# Kitchen dashboard queue
class KitchenQueueOut(BaseModel):
    items: List[OrderItemOut]
    total: int


# Request body for sending a session's cart to the kitchen
class ConfirmPayload(BaseModel):
    session_id: int


# Schema for moving an order through the kitchen
class OrderStatusPatch(BaseModel):
    status: KitchenStatus
