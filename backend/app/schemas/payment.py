from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal


class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    paid_on: date = Field(default_factory=date.today)
    note: Optional[str] = None


class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    paid_on: Optional[date] = None
    note: Optional[str] = None
