"""Policy health and premium arithmetic.

One shared implementation of the rules every view needs:

* health classification of a policy from its due date
* annualizing a premium by payment mode
* ledger completion (payments collected against the premium)
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Union
import enum

from app.core.config import settings
from app.models.customer import PaymentMode


class PolicyHealth(str, enum.Enum):
    ON_TRACK = "on_track"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


ANNUAL_FACTORS = {
    PaymentMode.MONTHLY: 12,
    PaymentMode.QUARTERLY: 4,
    PaymentMode.HALF_YEARLY: 2,
    PaymentMode.YEARLY: 1,
}

DateLike = Union[date, datetime, str, None]


def _as_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def days_until_due(due_date: DateLike, today: Optional[date] = None) -> Optional[int]:
    """Whole days from today to the due date (negative once it has passed)."""
    due = _as_date(due_date)
    if due is None:
        return None
    today = _as_date(today) or date.today()
    return (due - today).days


def classify_policy_health(
    due_date: DateLike,
    today: Optional[date] = None,
    due_soon_days: Optional[int] = None,
) -> PolicyHealth:
    """
    Classify a policy by comparing its due date with today, date-only.

    Past due -> overdue; due within the window (inclusive) -> due soon;
    anything later, or no due date at all -> on track.
    """
    days = days_until_due(due_date, today)
    if days is None:
        return PolicyHealth.ON_TRACK

    window = settings.DUE_SOON_DAYS if due_soon_days is None else due_soon_days
    if days < 0:
        return PolicyHealth.OVERDUE
    if days <= window:
        return PolicyHealth.DUE_SOON
    return PolicyHealth.ON_TRACK


def annual_factor(mode) -> int:
    """Number of premium payments per year for a payment mode."""
    return ANNUAL_FACTORS[PaymentMode(mode)]


def annualized_premium(premium, mode) -> Decimal:
    return Decimal(str(premium or 0)) * annual_factor(mode)


@dataclass
class LedgerSummary:
    premium: Decimal
    total_collected: Decimal
    remaining: Decimal
    progress_percent: float
    is_complete: bool

    def to_dict(self) -> dict:
        return {
            "premium": float(self.premium),
            "total_collected": float(self.total_collected),
            "remaining": float(self.remaining),
            "progress_percent": self.progress_percent,
            "is_complete": self.is_complete,
        }


def summarize_ledger(premium, amounts: Iterable) -> LedgerSummary:
    """Collected vs. owed for one premium cycle of a policy."""
    premium = Decimal(str(premium or 0))
    total = sum((Decimal(str(a or 0)) for a in amounts), Decimal("0"))

    if premium > 0:
        remaining = premium - total
        progress = round(float(total / premium * 100), 2)
    else:
        remaining = Decimal("0")
        progress = 0.0

    return LedgerSummary(
        premium=premium,
        total_collected=total,
        remaining=remaining,
        progress_percent=progress,
        is_complete=total >= premium,
    )
