"""Customers API: the agent's customer directory."""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import or_, func

from app.core.config import settings
from app.core.database import get_db
from app.models.customer import Customer, Policy
from app.models.payment import Payment
from app.schemas.customer import CustomerCreate, CustomerUpdate
from app.api.policies import get_customer_or_404, policy_to_dict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/customers", tags=["customers"])


# ── Search / List ──────────────────────────────────────────────────

@router.get("/")
def list_customers(
    q: str = Query("", description="Search by name or phone"),
    sort: str = Query("name", pattern="^(name|newest|policies)$"),
    db: Session = Depends(get_db),
):
    """List customers with their policy count and total premium."""
    query = db.query(Customer)
    if q.strip():
        search = f"%{_escape_like(q.strip())}%"
        query = query.filter(
            or_(
                Customer.name.ilike(search, escape="\\"),
                Customer.phone.like(search, escape="\\"),
            )
        )
    customers = query.all()

    summaries = {
        customer_id: (count, total)
        for customer_id, count, total in db.query(
            Policy.customer_id,
            func.count(Policy.id),
            func.coalesce(func.sum(Policy.premium), 0),
        ).group_by(Policy.customer_id).all()
    }

    now = datetime.utcnow()
    results = []
    for c in customers:
        count, total = summaries.get(c.id, (0, 0))
        total = Decimal(str(total))
        d = _customer_to_dict(c)
        d["policy_count"] = count
        d["total_premium"] = float(total)
        d["is_high_value"] = total > settings.HIGH_VALUE_PREMIUM
        d["is_new"] = _is_new(c.created_at, now)
        results.append(d)

    # Newest first is also the tie-break for the other orderings
    results.sort(key=lambda d: (d["created_at"] or "", d["id"]), reverse=True)
    if sort == "name":
        results.sort(key=lambda d: (d["name"] or "").lower())
    elif sort == "policies":
        results.sort(key=lambda d: d["policy_count"], reverse=True)

    return {"customers": results, "total": len(results), "sort": sort}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_customer(customer_data: CustomerCreate, db: Session = Depends(get_db)):
    customer = Customer(**customer_data.model_dump())
    db.add(customer)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Saving customer %s failed: %s", customer_data.name, e)
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")
    db.refresh(customer)

    logger.info("Created customer %s (%s)", customer.id, customer.name)
    return _customer_to_dict(customer)


# ── Customer Detail ────────────────────────────────────────────────

@router.get("/{customer_id}")
def get_customer(
    customer_id: int,
    as_of: Optional[date] = Query(None, description="Reference date for policy health, defaults to today"),
    db: Session = Depends(get_db),
):
    """Get a single customer with their policies, soonest due first."""
    customer = get_customer_or_404(db, customer_id)

    policies = (
        db.query(Policy)
        .filter(Policy.customer_id == customer_id)
        .order_by(Policy.due_date.asc(), Policy.id.asc())
        .all()
    )
    total_premium = sum((Decimal(str(p.premium or 0)) for p in policies), Decimal("0"))

    return {
        "customer": _customer_to_dict(customer),
        "policies": [policy_to_dict(p, as_of) for p in policies],
        "total_premium": float(total_premium),
    }


@router.patch("/{customer_id}")
def update_customer(customer_id: int, customer_update: CustomerUpdate, db: Session = Depends(get_db)):
    customer = get_customer_or_404(db, customer_id)

    for field, value in customer_update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(customer, field, value)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Updating customer %s failed: %s", customer_id, e)
        raise HTTPException(status_code=500, detail=f"Error: {str(e)}")
    db.refresh(customer)
    return _customer_to_dict(customer)


@router.delete("/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    """Delete a customer along with every policy and payment under it, in one transaction."""
    customer = get_customer_or_404(db, customer_id)
    policy_count = len(customer.policies)
    payment_count = sum(len(p.payments) for p in customer.policies)

    db.delete(customer)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Deleting customer %s failed: %s", customer_id, e)
        raise HTTPException(status_code=500, detail=f"Error deleting customer: {str(e)}")

    logger.info(
        "Deleted customer %s with %d policies and %d payments",
        customer_id, policy_count, payment_count,
    )
    return {
        "message": "Customer deleted successfully",
        "policies_deleted": policy_count,
        "payments_deleted": payment_count,
    }


# ── Recent Ledger Activity ─────────────────────────────────────────

@router.get("/{customer_id}/activity")
def recent_activity(customer_id: int, db: Session = Depends(get_db)):
    """Latest payment of each of the customer's policies, newest first."""
    customer = get_customer_or_404(db, customer_id)

    entries = []
    for policy in customer.policies:
        last = (
            db.query(Payment)
            .filter(Payment.policy_id == policy.id)
            .order_by(Payment.paid_on.desc(), Payment.id.desc())
            .first()
        )
        if last:
            entries.append({
                "payment_id": last.id,
                "policy_id": policy.id,
                "policy_name": policy.plan_name or policy.policy_number,
                "amount": float(last.amount),
                "paid_on": last.paid_on.isoformat(),
            })

    entries.sort(key=lambda e: (e["paid_on"], e["payment_id"]), reverse=True)
    return {"activity": entries[:settings.RECENT_ACTIVITY_LIMIT]}


# ── Helpers ────────────────────────────────────────────────────────

def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_new(created_at: Optional[datetime], now: datetime) -> bool:
    if not created_at:
        return False
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
    return (now - created_at).days < settings.NEW_CUSTOMER_DAYS


def _customer_to_dict(c: Customer) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "phone": c.phone,
        "address": c.address,
        "photo_url": c.photo_url,
        "created_at": c.created_at.isoformat() if c.created_at else None,
    }
