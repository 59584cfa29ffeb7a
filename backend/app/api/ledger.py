"""Ledger API: payments logged against a policy and premium-cycle renewal."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.payment import Payment
from app.schemas.payment import PaymentCreate, PaymentUpdate
from app.services.policy_health import summarize_ledger
from app.api.policies import get_policy_or_404, policy_to_dict

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/customers/{customer_id}/policies/{policy_id}", tags=["ledger"])


def _get_payment_or_404(db: Session, policy_id: int, payment_id: int) -> Payment:
    payment = (
        db.query(Payment)
        .filter(Payment.id == payment_id, Payment.policy_id == policy_id)
        .first()
    )
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


@router.get("/ledger")
def get_ledger(
    customer_id: int,
    policy_id: int,
    as_of: Optional[date] = Query(None, description="Reference date for policy health, defaults to today"),
    db: Session = Depends(get_db),
):
    """Policy, its payment history (newest first) and collected vs. owed."""
    policy = get_policy_or_404(db, customer_id, policy_id)
    payments = (
        db.query(Payment)
        .filter(Payment.policy_id == policy.id)
        .order_by(Payment.paid_on.desc(), Payment.id.desc())
        .all()
    )
    summary = summarize_ledger(policy.premium, [p.amount for p in payments])

    return {
        "policy": policy_to_dict(policy, as_of),
        "payments": [_payment_to_dict(p) for p in payments],
        "summary": summary.to_dict(),
    }


@router.post("/payments", status_code=status.HTTP_201_CREATED)
def add_payment(
    customer_id: int,
    policy_id: int,
    payment_data: PaymentCreate,
    db: Session = Depends(get_db),
):
    policy = get_policy_or_404(db, customer_id, policy_id)

    payment = Payment(
        policy_id=policy.id,
        amount=payment_data.amount,
        paid_on=payment_data.paid_on,
        note=payment_data.note or "No notes.",
    )
    db.add(payment)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Saving payment for policy %s failed: %s", policy_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to save payment: {str(e)}")
    db.refresh(payment)

    logger.info("Logged payment of %s on policy %s", payment.amount, policy_id)
    return _payment_to_dict(payment)


@router.patch("/payments/{payment_id}")
def update_payment(
    customer_id: int,
    policy_id: int,
    payment_id: int,
    payment_update: PaymentUpdate,
    db: Session = Depends(get_db),
):
    get_policy_or_404(db, customer_id, policy_id)
    payment = _get_payment_or_404(db, policy_id, payment_id)

    for field, value in payment_update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(payment, field, value)
    if not payment.note:
        payment.note = "No notes."

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Updating payment %s failed: %s", payment_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to save payment: {str(e)}")
    db.refresh(payment)
    return _payment_to_dict(payment)


@router.delete("/payments/{payment_id}")
def delete_payment(customer_id: int, policy_id: int, payment_id: int, db: Session = Depends(get_db)):
    get_policy_or_404(db, customer_id, policy_id)
    payment = _get_payment_or_404(db, policy_id, payment_id)

    db.delete(payment)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Deleting payment %s failed: %s", payment_id, e)
        raise HTTPException(status_code=500, detail=f"Deletion failed: {str(e)}")
    return {"message": "Payment deleted successfully"}


@router.post("/renew")
def renew_policy(customer_id: int, policy_id: int, db: Session = Depends(get_db)):
    """Start a new premium cycle once the current one is fully paid.

    Every payment on the ledger is cleared.
    """
    policy = get_policy_or_404(db, customer_id, policy_id)

    amounts = [a for (a,) in db.query(Payment.amount).filter(Payment.policy_id == policy.id).all()]
    if not summarize_ledger(policy.premium, amounts).is_complete:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Payment cycle not complete")

    logger.warning("Renewing policy %s, clearing its payments", policy_id)

    removed = (
        db.query(Payment)
        .filter(Payment.policy_id == policy.id)
        .delete(synchronize_session=False)
    )
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Renewal of policy %s failed: %s", policy_id, e)
        raise HTTPException(status_code=500, detail=f"Renewal failed: {str(e)}")

    logger.info("Policy %s renewed, %d payments removed", policy_id, removed)
    return {
        "policy_id": policy.id,
        "payments_deleted": removed,
        "summary": summarize_ledger(policy.premium, []).to_dict(),
    }


# ── Helpers ────────────────────────────────────────────────────────

def _payment_to_dict(p: Payment) -> dict:
    return {
        "id": p.id,
        "policy_id": p.policy_id,
        "amount": float(p.amount),
        "paid_on": p.paid_on.isoformat() if p.paid_on else None,
        "note": p.note,
        "created_at": p.created_at.isoformat() if p.created_at else None,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
    }
