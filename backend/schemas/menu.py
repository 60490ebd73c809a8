from pydantic import BaseModel, Field
from typing import List, Optional

# Schema for adding a dish to the menu
class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: float = Field(ge=0)
    is_available: bool = True

# Partial update; a new price only applies to items added afterwards
class MenuItemUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    is_available: Optional[bool] = None

class MenuItemOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: float
    is_available: bool

    class Config:
        from_attributes = True

class MenuPage(BaseModel):
    items: List[MenuItemOut]
    total: int
