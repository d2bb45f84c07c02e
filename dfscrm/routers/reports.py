"""Reports API — activity volume, funnel, employee performance, pipeline."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_user
from ..models import User
from ..services import report_service

router = APIRouter(tags=["reports"])


def _date_range(start: str | None, end: str | None) -> tuple[date | None, date | None]:
    try:
        s = date.fromisoformat(start) if start else None
        e = date.fromisoformat(end) if end else None
    except ValueError:
        raise HTTPException(400, "Invalid date format — use YYYY-MM-DD")
    if s and e and s > e:
        raise HTTPException(400, "start must be on or before end")
    return s, e


@router.get("/api/reports/activity")
def activity_report(
    start: str = Query(None, description="YYYY-MM-DD"),
    end: str = Query(None, description="YYYY-MM-DD"),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    s, e = _date_range(start, end)
    return report_service.get_activity_report(db, s, e)


@router.get("/api/reports/funnel")
def funnel_report(
    start: str = Query(None, description="YYYY-MM-DD"),
    end: str = Query(None, description="YYYY-MM-DD"),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    s, e = _date_range(start, end)
    return report_service.get_funnel_report(db, s, e)


@router.get("/api/reports/employees")
def employee_report(
    start: str = Query(None, description="YYYY-MM-DD"),
    end: str = Query(None, description="YYYY-MM-DD"),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    s, e = _date_range(start, end)
    return {"employees": report_service.get_employee_report(db, s, e)}


@router.get("/api/reports/pipeline")
def pipeline_report(
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return report_service.get_pipeline_report(db)
