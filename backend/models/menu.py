# backend/models/menu.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, CheckConstraint
from database import Base

# A dish or drink offered on the menu.
# The price here is the live catalog price; cart lines copy it at add-time.
class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String)
    category = Column(String, index=True)

    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
