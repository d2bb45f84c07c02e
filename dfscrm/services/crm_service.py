"""services/crm_service.py -- Company, employee, and activity persistence.

Routers stay thin; all writes to the CRM tables go through here so the
integrity rules live in one place:
  - activities must reference an existing company and employee
  - deleting a company deletes its activities explicitly (not left to the FK)
  - notes are kept newest first
"""

from datetime import date, datetime, timezone

from loguru import logger
from sqlalchemy.orm import Session

from ..errors import InvalidInputError, NotFoundError
from ..models import Activity, AuditLog, Company, Employee, User

_EMPLOYEE_NOT_NULL = ("name", "active")
_ACTIVITY_EDITABLE = ("type", "answered", "interested", "follow_up", "notes")


# ── Companies ─────────────────────────────────────────────────────────


def get_company(db: Session, company_id: str) -> Company:
    company = db.get(Company, company_id)
    if not company:
        raise NotFoundError(f"Company {company_id} not found")
    return company


def list_companies(db: Session, search: str = "", tag: str = "") -> list[Company]:
    q = db.query(Company)
    if search.strip():
        safe = search.strip().replace("%", r"\%").replace("_", r"\_")
        q = q.filter(Company.name.ilike(f"%{safe}%"))
    companies = q.order_by(Company.name).all()
    if tag:
        companies = [c for c in companies if tag in (c.tags or set())]
    return companies


def create_company(db: Session, fields: dict) -> Company:
    fields = {k: v for k, v in fields.items() if v is not None}
    if "tags" in fields:
        fields["tags"] = set(fields["tags"])
    company = Company(**fields)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def update_company(db: Session, company_id: str, fields: dict) -> Company:
    """Partial update. ``id`` and ``notes`` are not updatable here."""
    company = get_company(db, company_id)
    if "name" in fields and not fields["name"]:
        raise InvalidInputError("Company name is required")
    for field, value in fields.items():
        if field in ("id", "notes"):
            continue
        if field == "tags":
            value = set(value or ())
        setattr(company, field, value)
    db.commit()
    db.refresh(company)
    return company


def add_note(db: Session, company_id: str, author: str, text: str) -> Company:
    """Prepend a note so the list stays newest first."""
    company = get_company(db, company_id)
    note = {
        "author": author,
        "text": text,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    company.notes = [note] + list(company.notes or [])
    db.commit()
    db.refresh(company)
    return company


def delete_company(db: Session, company_id: str, user: User | None = None) -> int:
    """Delete a company and its activities. Returns the activity count removed."""
    company = get_company(db, company_id)
    name = company.name
    removed = (
        db.query(Activity)
        .filter(Activity.company_id == company.id)
        .delete(synchronize_session=False)
    )
    db.expire(company, ["activities"])
    db.delete(company)
    db.add(
        AuditLog(
            user_id=user.id if user else None,
            action_type="delete",
            entity_type="company",
            entity_id=company_id,
            details={"name": name, "activities_removed": removed},
        )
    )
    db.commit()
    logger.info("Deleted company {} ({} activities)", company_id, removed)
    return removed


# ── Employees ─────────────────────────────────────────────────────────


def get_employee(db: Session, employee_id: str) -> Employee:
    employee = db.get(Employee, employee_id)
    if not employee:
        raise NotFoundError(f"Employee {employee_id} not found")
    return employee


def list_employees(db: Session, active_only: bool = False) -> list[Employee]:
    q = db.query(Employee)
    if active_only:
        q = q.filter(Employee.active.is_(True))
    return q.order_by(Employee.name).all()


def create_employee(db: Session, fields: dict) -> Employee:
    employee = Employee(**{k: v for k, v in fields.items() if v is not None})
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def update_employee(db: Session, employee_id: str, fields: dict) -> Employee:
    employee = get_employee(db, employee_id)
    for field in _EMPLOYEE_NOT_NULL:
        if field in fields and fields[field] is None:
            raise InvalidInputError(f"Employee {field} cannot be null")
    for field, value in fields.items():
        if field == "id":
            continue
        setattr(employee, field, value)
    db.commit()
    db.refresh(employee)
    return employee


def delete_employee(db: Session, employee_id: str) -> None:
    employee = get_employee(db, employee_id)
    db.query(Activity).filter(Activity.employee_id == employee.id).delete(synchronize_session=False)
    db.query(User).filter(User.employee_id == employee.id).update(
        {User.employee_id: None}, synchronize_session=False
    )
    db.expire(employee)
    db.delete(employee)
    db.commit()


def link_user_to_employee(db: Session, user: User, employee_id: str | None) -> User:
    """Set or clear the explicit user → employee reference."""
    if employee_id is not None:
        get_employee(db, employee_id)
    user.employee_id = employee_id
    db.commit()
    return user


def backfill_user_employee_links(db: Session) -> dict:
    """One-time migration from the legacy by-name link to users.employee_id.

    Legacy logins found their employee record by exact display name among
    active employees. Users that already have an employee_id are left
    alone; names matching zero or several employees are reported, not
    guessed.
    """
    by_name: dict[str, list[Employee]] = {}
    for emp in db.query(Employee).filter(Employee.active.is_(True)).all():
        by_name.setdefault(emp.name, []).append(emp)
    taken = {uid for (uid,) in db.query(User.employee_id).filter(User.employee_id.isnot(None))}

    stats = {"linked": 0, "unmatched": [], "ambiguous": []}
    for user in db.query(User).filter(User.employee_id.is_(None), User.role == "user").all():
        matches = [e for e in by_name.get(user.name, []) if e.id not in taken]
        if not matches:
            stats["unmatched"].append(user.username)
        elif len(matches) > 1:
            stats["ambiguous"].append(user.username)
        else:
            user.employee_id = matches[0].id
            taken.add(matches[0].id)
            stats["linked"] += 1
    db.commit()
    logger.info(
        "User→employee backfill: {} linked, {} unmatched, {} ambiguous",
        stats["linked"], len(stats["unmatched"]), len(stats["ambiguous"]),
    )
    return stats


# ── Activities ────────────────────────────────────────────────────────


def list_activities(
    db: Session,
    company_id: str | None = None,
    employee_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[Activity]:
    q = db.query(Activity)
    if company_id:
        q = q.filter(Activity.company_id == company_id)
    if employee_id:
        q = q.filter(Activity.employee_id == employee_id)
    if start:
        q = q.filter(Activity.date >= start)
    if end:
        q = q.filter(Activity.date <= end)
    return q.order_by(Activity.date.desc(), Activity.created_at.desc()).all()


def create_activity(db: Session, fields: dict) -> Activity:
    """Log a call or email. Company and employee must already exist."""
    get_company(db, fields["company_id"])
    get_employee(db, fields["employee_id"])
    activity = Activity(**{k: v for k, v in fields.items() if v is not None})
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


def get_activity(db: Session, activity_id: str) -> Activity:
    activity = db.get(Activity, activity_id)
    if not activity:
        raise NotFoundError(f"Activity {activity_id} not found")
    return activity


def update_activity(db: Session, activity_id: str, fields: dict) -> Activity:
    """Edit a logged activity's outcome (type, flags, notes).

    These flags drive the funnel and pipeline reports, so a corrected
    outcome shows up on the next report request.
    """
    activity = get_activity(db, activity_id)
    updates = {k: v for k, v in fields.items() if k in _ACTIVITY_EDITABLE}
    for field, value in updates.items():
        if value is None and field != "notes":
            raise InvalidInputError(f"Activity {field} cannot be null")
    for field, value in updates.items():
        setattr(activity, field, value)
    db.commit()
    db.refresh(activity)
    return activity


def delete_activity(db: Session, activity_id: str) -> None:
    activity = get_activity(db, activity_id)
    db.delete(activity)
    db.commit()
