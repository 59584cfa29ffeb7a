from app.models.agent import Agent
from app.models.customer import Customer, Policy, PaymentMode
from app.models.payment import Payment

__all__ = [
    "Agent",
    "Customer",
    "Policy",
    "PaymentMode",
    "Payment",
]
