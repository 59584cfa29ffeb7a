from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.core.config import settings
from app.models.customer import Customer, Policy
from app.services.policy_health import (
    PolicyHealth,
    annualized_premium,
    classify_policy_health,
)


def _premium(policy) -> Decimal:
    return Decimal(str(policy.premium or 0))


def _whole_percent(part: int, total: int) -> int:
    # Halves round up (12.5 -> 13)
    if not total:
        return 0
    return int((Decimal(part * 100) / Decimal(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def health_distribution(policies: Iterable, today: date) -> Dict[str, int]:
    counts = {h.value: 0 for h in PolicyHealth}
    for p in policies:
        counts[classify_policy_health(p.due_date, today).value] += 1
    return counts


def monthly_premium_trend(policies: Iterable, months: Optional[int] = None) -> List[dict]:
    """
    Premium due per calendar month of the due date.

    Keeps the latest `months` months that actually have policies due,
    oldest first.
    """
    months = settings.TREND_MONTHS if months is None else months
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for p in policies:
        if not p.due_date:
            continue
        totals[p.due_date.strftime("%Y-%m")] += _premium(p)

    keys = sorted(totals)[-months:] if months > 0 else []
    trend = []
    for key in keys:
        year, month = key.split("-")
        trend.append({
            "month": key,
            "label": date(int(year), int(month), 1).strftime("%b %Y"),
            "premium": float(totals[key]),
        })
    return trend


def build_dashboard_summary(customer_count: int, policies: List, today: date) -> dict:
    """Headline numbers for the agent dashboard. Every policy counts."""
    health = health_distribution(policies, today)
    total = len(policies)
    on_track = health[PolicyHealth.ON_TRACK.value]
    annual = sum((annualized_premium(p.premium, p.mode) for p in policies), Decimal("0"))

    return {
        "as_of": today.isoformat(),
        "total_customers": customer_count,
        "total_policies": total,
        "due_soon_count": health[PolicyHealth.DUE_SOON.value],
        "overdue_count": health[PolicyHealth.OVERDUE.value],
        "on_track_count": on_track,
        "on_track_percent": _whole_percent(on_track, total),
        "total_annual_premium": float(annual),
    }


def build_portfolio_report(
    customer_count: int,
    policies: List,
    today: date,
    months: Optional[int] = None,
) -> dict:
    """Portfolio report: only policies carrying a positive premium are counted."""
    priced = [p for p in policies if _premium(p) > 0]
    annual = sum((annualized_premium(p.premium, p.mode) for p in priced), Decimal("0"))

    return {
        "as_of": today.isoformat(),
        "total_clients": customer_count,
        "total_policies": len(priced),
        "annual_premium": float(annual),
        "policy_health": health_distribution(priced, today),
        "monthly_trend": monthly_premium_trend(priced, months),
    }


class ReportingService:
    """Loads the whole book and reduces it into dashboard/report figures."""

    def __init__(self, db: Session):
        self.db = db

    def _customer_count(self) -> int:
        return self.db.query(func.count(Customer.id)).scalar() or 0

    def _all_policies(self) -> List[Policy]:
        return self.db.query(Policy).all()

    def dashboard(self, today: Optional[date] = None) -> dict:
        today = today or date.today()
        return build_dashboard_summary(self._customer_count(), self._all_policies(), today)

    def portfolio_report(self, today: Optional[date] = None) -> dict:
        today = today or date.today()
        return build_portfolio_report(self._customer_count(), self._all_policies(), today)

    def agent_performance(self) -> dict:
        # Customers carry no owner, so every agent sees the whole book
        return {
            "total_clients": self._customer_count(),
            "total_policies": self.db.query(func.count(Policy.id)).scalar() or 0,
        }
