from pydantic import BaseModel, Field
from typing import List, Literal, Optional

# Whole-table bill: shared items at their full price
class SessionBillOut(BaseModel):
    session_id: int
    subtotal: float
    discount: float = 0
    vat: float
    total: float
    vat_rate: float
    line_count: int

# One diner's bill: own items plus their share of split items
class DinerBillOut(BaseModel):
    session_id: int
    diner_name: str
    personal_total: float
    shared_total: float
    subtotal: float
    discount: float = 0
    vat: float
    total: float
    vat_rate: float

# Manager discount on the whole session, taken off before VAT
class DiscountIn(BaseModel):
    kind: Literal["fixed", "percentage"]
    amount: float = Field(gt=0)

# Manager correction: void confirmed lines and/or add a discount
class BillAdjustment(BaseModel):
    voids: List[int] = []
    discount: Optional[DiscountIn] = None
    reason: Optional[str] = None

# Input schema for a diner paying their bill (amount defaults to the outstanding balance)
class PaymentCreate(BaseModel):
    session_id: int
    diner_name: str
    amount: Optional[float] = Field(default=None, gt=0)
    tip: float = Field(default=0, ge=0)
    method: str = "card"

class PaymentOut(BaseModel):
    id: int
    session_id: int
    diner_name: str
    amount: float
    tip: float
    method: str

class DinerPaymentOut(BaseModel):
    diner_name: str
    bill_total: float
    paid: float
    tips: float
    outstanding: float
    is_paid: bool

class PaymentOverviewOut(BaseModel):
    session_id: int
    diners: List[DinerPaymentOut]
    all_paid: bool
