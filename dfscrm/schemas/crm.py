"""
schemas/crm.py — Pydantic models for CRM endpoints

Validates Companies, Employees, Activities, and Notes.

Business Rules:
- Company and employee names are required and non-empty
- Activity type is "call" or "email"
- Tags are a set: duplicates and blanks are dropped
- Company id is immutable; it can be supplied on create only
- Updates may omit a required field but never set it to null

Called by: routers/crm.py
Depends on: pydantic
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.normalization_helpers import normalize_tags


def _required(v: str | None, label: str) -> str:
    v = v.strip() if v is not None else ""
    if not v:
        raise ValueError(f"{label} is required")
    return v


# ── Companies ────────────────────────────────────────────────────────


class CompanyBase(BaseModel):
    type: str | None = None
    contact_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    is_customer: bool | None = None
    tags: list[str] | None = None
    follow_up_date: dt.date | None = None
    follow_up_note: str | None = None
    last_order_date: dt.date | None = None
    last_estimate_date: dt.date | None = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return sorted(normalize_tags(v))


class CompanyCreate(CompanyBase):
    id: str | None = None
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _required(v, "Company name")


class CompanyUpdate(CompanyBase):
    name: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str:
        # Runs only when the field is sent, so an explicit null is rejected
        return _required(v, "Company name")


class NoteOut(BaseModel):
    author: str = ""
    text: str = ""
    timestamp: str | None = None


class CompanyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str | None = None
    contact_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    notes: list[NoteOut] = Field(default_factory=list)
    is_customer: bool = False
    tags: list[str] = Field(default_factory=list)
    follow_up_date: dt.date | None = None
    follow_up_note: str | None = None
    last_order_date: dt.date | None = None
    last_estimate_date: dt.date | None = None
    external_customer_id: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @field_validator("notes", mode="before")
    @classmethod
    def notes_as_list(cls, v):
        if not isinstance(v, list):
            return []
        return [n for n in v if isinstance(n, dict)]

    @field_validator("tags", mode="before")
    @classmethod
    def tags_sorted(cls, v):
        return sorted(normalize_tags(v))

    @field_validator("is_customer", mode="before")
    @classmethod
    def none_is_false(cls, v):
        return bool(v)


class NoteCreate(BaseModel):
    text: str
    author: str | None = None

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        return _required(v, "Note text")


# ── Employees ────────────────────────────────────────────────────────


class EmployeeCreate(BaseModel):
    id: str | None = None
    name: str
    role: str | None = None
    active: bool = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _required(v, "Employee name")


class EmployeeUpdate(BaseModel):
    name: str | None = None
    role: str | None = None
    active: bool | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str:
        return _required(v, "Employee name")

    @field_validator("active")
    @classmethod
    def active_not_null(cls, v: bool | None) -> bool:
        if v is None:
            raise ValueError("active cannot be null")
        return v


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: str | None = None
    active: bool = True


# ── Activities ───────────────────────────────────────────────────────


class ActivityCreate(BaseModel):
    id: str | None = None
    company_id: str
    employee_id: str
    type: Literal["call", "email"]
    answered: bool = False
    interested: bool = False
    follow_up: bool = False
    notes: str | None = None
    date: dt.date

    @field_validator("company_id", "employee_id")
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        return _required(v, "Reference id")


class ActivityUpdate(BaseModel):
    """Editable outcome fields. Company, employee, and date are fixed once logged."""

    type: Literal["call", "email"] | None = None
    answered: bool | None = None
    interested: bool | None = None
    follow_up: bool | None = None
    notes: str | None = None

    @field_validator("type", "answered", "interested", "follow_up")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str
    employee_id: str
    type: str
    answered: bool = False
    interested: bool = False
    follow_up: bool = False
    notes: str | None = None
    date: dt.date
    created_at: dt.datetime | None = None
