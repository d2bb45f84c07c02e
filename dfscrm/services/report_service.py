"""
Reports — activity volume, conversion funnel, employee performance, pipeline.

Every report is built from a snapshot of Activity / Company / Employee rows
fetched per request; nothing is cached or persisted. The build_* functions
are pure and take plain lists so they can be tested without a database.

Called by: routers/reports.py, routers/crm.py (dashboard stats)
Depends on: models
"""

import math
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from ..models import Activity, Company, Employee

STATUS_CUSTOMERS = "customers"
STATUS_INTERESTED = "interested"
STATUS_NEEDS_FOLLOW_UP = "needs_follow_up"
STATUS_CONTACTED = "contacted"
STATUS_NOT_CONTACTED = "not_contacted"

UNKNOWN_TYPE = "Unknown"


# ── Helpers ───────────────────────────────────────────────────────────


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(d: date) -> date:
    """Sunday on or before ``d``. Weeks always start on Sunday."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def _empty_counts() -> dict:
    return {"calls": 0, "emails": 0, "answered": 0, "interested": 0}


def _count(bucket: dict, a) -> None:
    if a.type == "call":
        bucket["calls"] += 1
    elif a.type == "email":
        bucket["emails"] += 1
    if a.answered:
        bucket["answered"] += 1
    if a.interested:
        bucket["interested"] += 1


def _pct(num: int, den: int) -> int:
    """Whole percent, halves rounded up (12.5 → 13), 0 when den is 0."""
    if den <= 0:
        return 0
    return math.floor(num * 100 / den + 0.5)


# ── Pure builders ─────────────────────────────────────────────────────


def build_activity_report(activities: list) -> dict:
    """Bucket activities by day, Sunday-start week, and month."""
    by_date: dict[str, dict] = {}
    by_week: dict[str, dict] = {}
    by_month: dict[str, dict] = {}
    total = _empty_counts()

    for a in activities:
        d = _as_date(a.date)
        day_key = d.isoformat()
        _count(by_date.setdefault(day_key, _empty_counts()), a)
        _count(by_week.setdefault(week_start(d).isoformat(), _empty_counts()), a)
        _count(by_month.setdefault(day_key[:7], _empty_counts()), a)
        _count(total, a)

    total["activities"] = len(activities)
    return {
        "by_date": dict(sorted(by_date.items())),
        "by_week": dict(sorted(by_week.items())),
        "by_month": dict(sorted(by_month.items())),
        "total": total,
    }


def build_funnel(activities: list, companies: list) -> dict:
    """Distinct companies at each funnel stage.

    ``activities`` may be date-filtered; the customer count is always a
    snapshot of the full company set.
    """
    contacted, answered, interested = set(), set(), set()
    for a in activities:
        contacted.add(a.company_id)
        if a.answered:
            answered.add(a.company_id)
        if a.interested:
            interested.add(a.company_id)

    return {
        "total_companies": len(companies),
        "contacted": len(contacted),
        "answered": len(answered),
        "interested": len(interested),
        "customers": sum(1 for c in companies if c.is_customer),
    }


def build_employee_performance(employees: list, activities: list) -> list[dict]:
    """Per-employee counters and rates, busiest employee first.

    answer_rate divides by calls only (answered emails are not in the
    denominator); interest_rate divides by answered.
    """
    by_employee: dict[str, list] = {}
    for a in activities:
        by_employee.setdefault(a.employee_id, []).append(a)

    rows = []
    for emp in employees:
        acts = by_employee.get(emp.id, [])
        calls = sum(1 for a in acts if a.type == "call")
        emails = sum(1 for a in acts if a.type == "email")
        answered = sum(1 for a in acts if a.answered)
        interested = sum(1 for a in acts if a.interested)
        rows.append({
            "employee_id": emp.id,
            "name": emp.name,
            "role": emp.role,
            "active": bool(emp.active),
            "calls": calls,
            "emails": emails,
            "total_activities": len(acts),
            "answered": answered,
            "interested": interested,
            "follow_ups": sum(1 for a in acts if a.follow_up),
            "answer_rate": _pct(answered, calls),
            "interest_rate": _pct(interested, answered),
        })

    rows.sort(key=lambda r: r["total_activities"], reverse=True)
    return rows


def classify_company(company, activities: list) -> str:
    """Pipeline status; first matching rule wins.

    customer → interested → needs follow-up → contacted → not contacted.
    """
    if company.is_customer:
        return STATUS_CUSTOMERS
    if any(a.interested for a in activities):
        return STATUS_INTERESTED
    if any(a.follow_up for a in activities):
        return STATUS_NEEDS_FOLLOW_UP
    if activities:
        return STATUS_CONTACTED
    return STATUS_NOT_CONTACTED


def build_pipeline(companies: list, activities: list) -> dict:
    """Company counts by type, by tag, and by derived status."""
    by_company: dict[str, list] = {}
    for a in activities:
        by_company.setdefault(a.company_id, []).append(a)

    by_type: dict[str, dict] = {}
    by_tag: dict[str, dict] = {}
    by_status = {
        STATUS_CUSTOMERS: 0,
        STATUS_INTERESTED: 0,
        STATUS_NEEDS_FOLLOW_UP: 0,
        STATUS_CONTACTED: 0,
        STATUS_NOT_CONTACTED: 0,
    }

    for c in companies:
        kind = "customers" if c.is_customer else "prospects"

        type_key = (c.type or "").strip() or UNKNOWN_TYPE
        bucket = by_type.setdefault(type_key, {"total": 0, "customers": 0, "prospects": 0})
        bucket["total"] += 1
        bucket[kind] += 1

        for tag in sorted(c.tags or ()):
            bucket = by_tag.setdefault(tag, {"total": 0, "customers": 0, "prospects": 0})
            bucket["total"] += 1
            bucket[kind] += 1

        by_status[classify_company(c, by_company.get(c.id, []))] += 1

    return {
        "by_type": dict(sorted(by_type.items())),
        "by_tag": dict(sorted(by_tag.items())),
        "by_status": by_status,
    }


# ── DB-facing wrappers ────────────────────────────────────────────────


def _activities(db: Session, start: date | None = None, end: date | None = None) -> list:
    q = db.query(Activity)
    if start:
        q = q.filter(Activity.date >= start)
    if end:
        q = q.filter(Activity.date <= end)
    return q.order_by(Activity.date).all()


def get_activity_report(db: Session, start: date | None = None, end: date | None = None) -> dict:
    return build_activity_report(_activities(db, start, end))


def get_funnel_report(db: Session, start: date | None = None, end: date | None = None) -> dict:
    return build_funnel(_activities(db, start, end), db.query(Company).all())


def get_employee_report(db: Session, start: date | None = None, end: date | None = None) -> list[dict]:
    employees = db.query(Employee).order_by(Employee.name).all()
    return build_employee_performance(employees, _activities(db, start, end))


def get_pipeline_report(db: Session) -> dict:
    return build_pipeline(db.query(Company).all(), _activities(db))


def get_dashboard_stats(db: Session) -> dict:
    """Headline counters for the dashboard (activity counts, not distinct companies)."""
    activities = _activities(db)
    return {
        "total_companies": db.query(Company).count(),
        "contacted": sum(1 for a in activities if a.answered),
        "interested": sum(1 for a in activities if a.interested),
        "needs_follow_up": sum(1 for a in activities if a.follow_up),
        "total_calls": sum(1 for a in activities if a.type == "call"),
        "total_emails": sum(1 for a in activities if a.type == "email"),
    }
