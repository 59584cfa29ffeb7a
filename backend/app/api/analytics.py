"""Analytics API: dashboard headline numbers and the portfolio report."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.reporting import ReportingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/dashboard")
def get_dashboard(
    as_of: Optional[date] = Query(None, description="Reference date YYYY-MM-DD, defaults to today"),
    db: Session = Depends(get_db),
):
    """Policy counts by health and total annualized premium across the book."""
    return ReportingService(db).dashboard(as_of)


@router.get("/reports")
def get_reports(
    as_of: Optional[date] = Query(None, description="Reference date YYYY-MM-DD, defaults to today"),
    db: Session = Depends(get_db),
):
    """
    Portfolio report over priced policies: health distribution,
    annualized premium and the monthly premium-due trend.
    """
    report = ReportingService(db).portfolio_report(as_of)
    logger.debug("Report built over %d policies", report["total_policies"])
    return report
