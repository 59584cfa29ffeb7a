"""Customer book: customers and the insurance policies they hold."""
from sqlalchemy import Column, Integer, String, DateTime, Date, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
import enum


class PaymentMode(str, enum.Enum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    HALF_YEARLY = "Half-Yearly"
    YEARLY = "Yearly"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False, index=True)
    address = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Deleting a customer takes its policies (and their payments) with it
    policies = relationship(
        "Policy",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="Policy.due_date",
    )


class Policy(Base):
    __tablename__ = "policies"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)

    policy_number = Column(String, nullable=False, index=True)
    plan_name = Column(String, nullable=True)
    premium = Column(Numeric(12, 2), nullable=False)
    mode = Column(String, nullable=False, default=PaymentMode.MONTHLY.value)
    due_date = Column(Date, nullable=False, index=True)
    sum_assured = Column(Numeric(14, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="Active")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="policies")
    payments = relationship(
        "Payment",
        back_populates="policy",
        cascade="all, delete-orphan",
    )
