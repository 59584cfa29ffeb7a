from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal
from app.models.customer import PaymentMode


class PolicyCreate(BaseModel):
    policy_number: str = Field(..., min_length=1)
    plan_name: Optional[str] = None
    premium: Decimal = Field(..., gt=0, decimal_places=2)
    mode: PaymentMode = PaymentMode.MONTHLY
    due_date: date
    sum_assured: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    notes: Optional[str] = None

    class Config:
        str_strip_whitespace = True


class PolicyUpdate(BaseModel):
    policy_number: Optional[str] = Field(None, min_length=1)
    plan_name: Optional[str] = None
    premium: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    mode: Optional[PaymentMode] = None
    due_date: Optional[date] = None
    sum_assured: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    notes: Optional[str] = None

    class Config:
        str_strip_whitespace = True
