from pydantic import BaseModel, Field
from typing import List, Optional

# Request schema for adding a menu item to a diner's cart
class CartAddItem(BaseModel):
    session_id: int
    diner_name: str = Field(min_length=1)
    menu_item_id: int
    notes: Optional[str] = None
    is_shared: bool = False
    is_takeaway: bool = False
    customizations: List[str] = []

# Request schema for setting an absolute quantity (0 removes the line)
class CartUpdateItem(BaseModel):
    quantity: int
    expected_version: Optional[int] = None

# Request schema for +/- buttons
class CartChangeItem(BaseModel):
    delta: int
    expected_version: Optional[int] = None

# Split details embedded in a cart line
class SplitOut(BaseModel):
    line_id: int
    participants: List[str]
    split_count: int
    original_price: float
    split_price: float
    version: int

# Response schema for a single cart line
class CartItemOut(BaseModel):
    id: int
    session_id: int
    diner_name: str
    menu_item_id: int
    name: str
    quantity: int
    unit_price: float
    line_total: float
    notes: Optional[str] = None
    is_shared: bool
    is_takeaway: bool
    customizations: List[str]
    status: str
    version: int
    split: Optional[SplitOut] = None

# Response schema for a session's pending cart
class CartOut(BaseModel):
    session_id: int
    items: List[CartItemOut]
    total: float

# Response schema for cart clearing
class CartClearOut(BaseModel):
    session_id: int
    deleted_lines: int
    deleted_splits: int
