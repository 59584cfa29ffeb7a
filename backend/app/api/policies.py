"""Policies API: insurance policies held by a customer."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.customer import Customer, Policy
from app.schemas.policy import PolicyCreate, PolicyUpdate
from app.services.policy_health import (
    annualized_premium,
    classify_policy_health,
    days_until_due,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/customers/{customer_id}/policies", tags=["policies"])


def get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


def get_policy_or_404(db: Session, customer_id: int, policy_id: int) -> Policy:
    policy = (
        db.query(Policy)
        .filter(Policy.id == policy_id, Policy.customer_id == customer_id)
        .first()
    )
    if not policy:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Policy not found")
    return policy


@router.get("/")
def list_policies(
    customer_id: int,
    as_of: Optional[date] = Query(None, description="Reference date for health, defaults to today"),
    db: Session = Depends(get_db),
):
    """Policies of a customer, soonest due first."""
    get_customer_or_404(db, customer_id)
    policies = (
        db.query(Policy)
        .filter(Policy.customer_id == customer_id)
        .order_by(Policy.due_date.asc(), Policy.id.asc())
        .all()
    )
    return {"policies": [policy_to_dict(p, as_of) for p in policies], "total": len(policies)}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_policy(customer_id: int, policy_data: PolicyCreate, db: Session = Depends(get_db)):
    get_customer_or_404(db, customer_id)

    fields = policy_data.model_dump()
    fields["mode"] = policy_data.mode.value
    policy = Policy(**fields, customer_id=customer_id, status="Active")
    db.add(policy)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Saving policy %s for customer %s failed: %s", policy_data.policy_number, customer_id, e)
        raise HTTPException(status_code=500, detail=f"Could not save policy: {str(e)}")
    db.refresh(policy)

    logger.info("Added policy %s to customer %s", policy.policy_number, customer_id)
    return policy_to_dict(policy)


@router.get("/{policy_id}")
def get_policy(
    customer_id: int,
    policy_id: int,
    as_of: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    return policy_to_dict(get_policy_or_404(db, customer_id, policy_id), as_of)


@router.patch("/{policy_id}")
def update_policy(
    customer_id: int,
    policy_id: int,
    policy_update: PolicyUpdate,
    db: Session = Depends(get_db),
):
    """Edit a policy. Saving always marks it Active again."""
    policy = get_policy_or_404(db, customer_id, policy_id)

    for field, value in policy_update.model_dump(exclude_unset=True, exclude_none=True).items():
        if field == "mode":
            value = value.value
        setattr(policy, field, value)
    policy.status = "Active"

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Updating policy %s failed: %s", policy_id, e)
        raise HTTPException(status_code=500, detail=f"Could not update policy: {str(e)}")
    db.refresh(policy)
    return policy_to_dict(policy)


@router.delete("/{policy_id}")
def delete_policy(customer_id: int, policy_id: int, db: Session = Depends(get_db)):
    """Delete a policy together with its payment ledger."""
    policy = get_policy_or_404(db, customer_id, policy_id)
    payment_count = len(policy.payments)

    db.delete(policy)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Deleting policy %s failed: %s", policy_id, e)
        raise HTTPException(status_code=500, detail=f"Could not delete policy: {str(e)}")

    logger.info("Deleted policy %s (%d payments) of customer %s", policy_id, payment_count, customer_id)
    return {"message": "Policy deleted successfully", "payments_deleted": payment_count}


# ── Helpers ────────────────────────────────────────────────────────

def policy_to_dict(p: Policy, today: Optional[date] = None) -> dict:
    return {
        "id": p.id,
        "customer_id": p.customer_id,
        "policy_number": p.policy_number,
        "plan_name": p.plan_name,
        "premium": float(p.premium) if p.premium is not None else None,
        "mode": p.mode,
        "annual_premium": float(annualized_premium(p.premium, p.mode)),
        "due_date": p.due_date.isoformat() if p.due_date else None,
        "days_until_due": days_until_due(p.due_date, today),
        "health": classify_policy_health(p.due_date, today).value,
        "sum_assured": float(p.sum_assured) if p.sum_assured is not None else 0.0,
        "notes": p.notes,
        "status": p.status,
        "created_at": p.created_at.isoformat() if p.created_at else None,
    }
