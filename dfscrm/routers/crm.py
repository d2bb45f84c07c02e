"""
routers/crm.py — CRM Routes (Companies, Employees, Activities, Dashboard)

Business Rules:
- Company ids are opaque strings; supplied ids are kept, missing ids generated
- Deleting a company deletes its activities
- Notes are appended newest first; author defaults to the logged-in user
- Activities must reference an existing company and employee (404 otherwise)
- Activity edits change type, outcome flags, and notes only
- Employee deletion is admin-only

Called by: main.py (router mount)
Depends on: services/crm_service.py, services/report_service.py, schemas/crm.py
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_admin, require_user
from ..models import User
from ..schemas.crm import (
    ActivityCreate,
    ActivityOut,
    ActivityUpdate,
    CompanyCreate,
    CompanyOut,
    CompanyUpdate,
    EmployeeCreate,
    EmployeeOut,
    EmployeeUpdate,
    NoteCreate,
)
from ..services import crm_service
from ..services.report_service import get_dashboard_stats

router = APIRouter(tags=["crm"])


# ── Companies ────────────────────────────────────────────────────────────


@router.get("/api/companies", response_model=list[CompanyOut])
async def list_companies(
    search: str = "",
    tag: str = "",
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.list_companies(db, search=search, tag=tag)


@router.get("/api/companies/{company_id}", response_model=CompanyOut)
async def get_company(
    company_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.get_company(db, company_id)


@router.post("/api/companies", response_model=CompanyOut, status_code=201)
async def create_company(
    payload: CompanyCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.create_company(db, payload.model_dump())


@router.put("/api/companies/{company_id}", response_model=CompanyOut)
async def update_company(
    company_id: str,
    payload: CompanyUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.update_company(db, company_id, payload.model_dump(exclude_unset=True))


@router.delete("/api/companies/{company_id}")
async def delete_company(
    company_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    removed = crm_service.delete_company(db, company_id, user)
    return {"ok": True, "activities_removed": removed}


@router.post("/api/companies/{company_id}/notes", response_model=CompanyOut, status_code=201)
async def add_company_note(
    company_id: str,
    payload: NoteCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    author = payload.author or user.name or user.username
    return crm_service.add_note(db, company_id, author, payload.text)


# ── Employees ────────────────────────────────────────────────────────────


@router.get("/api/employees", response_model=list[EmployeeOut])
async def list_employees(
    active_only: bool = False,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.list_employees(db, active_only=active_only)


@router.post("/api/employees", response_model=EmployeeOut, status_code=201)
async def create_employee(
    payload: EmployeeCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.create_employee(db, payload.model_dump())


@router.put("/api/employees/{employee_id}", response_model=EmployeeOut)
async def update_employee(
    employee_id: str,
    payload: EmployeeUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.update_employee(db, employee_id, payload.model_dump(exclude_unset=True))


@router.delete("/api/employees/{employee_id}")
async def delete_employee(
    employee_id: str,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    crm_service.delete_employee(db, employee_id)
    return {"ok": True}


# ── Activities ───────────────────────────────────────────────────────────


@router.get("/api/activities", response_model=list[ActivityOut])
async def list_activities(
    company_id: str | None = None,
    employee_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.list_activities(db, company_id, employee_id, start, end)


@router.post("/api/activities", response_model=ActivityOut, status_code=201)
async def create_activity(
    payload: ActivityCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.create_activity(db, payload.model_dump())


@router.put("/api/activities/{activity_id}", response_model=ActivityOut)
async def update_activity(
    activity_id: str,
    payload: ActivityUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return crm_service.update_activity(db, activity_id, payload.model_dump(exclude_unset=True))


@router.delete("/api/activities/{activity_id}")
async def delete_activity(
    activity_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    crm_service.delete_activity(db, activity_id)
    return {"ok": True}


# ── Dashboard ────────────────────────────────────────────────────────────


@router.get("/api/stats")
async def dashboard_stats(
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return get_dashboard_stats(db)
