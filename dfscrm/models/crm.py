"""CRM models — Companies, Employees, and Activities."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..utils.json_types import JSONList, JSONTagSet
from .base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Company(Base):
    """Prospect or customer organization."""

    __tablename__ = "companies"
    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    type = Column(String(100))  # free text: Contractor, Property Manager, Customer, ...
    contact_name = Column(String(255))

    # Postal address
    address = Column(String(500))  # street
    city = Column(String(255))
    state = Column(String(100))
    zip = Column(String(20))

    phone = Column(String(100))
    email = Column(String(255))
    website = Column(String(500))

    notes = Column(JSONList, default=lambda: [])  # [{author, text, timestamp}], newest first
    tags = Column(JSONTagSet, default=lambda: set())
    is_customer = Column(Boolean, default=False)

    follow_up_date = Column(Date)
    follow_up_note = Column(Text)
    last_order_date = Column(Date)
    last_estimate_date = Column(Date)

    # Invoicing integration link
    external_customer_id = Column(String(100))

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    activities = relationship(
        "Activity", back_populates="company", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("ix_companies_name", "name"),
        Index("ix_companies_external_customer", "external_customer_id"),
    )


class Employee(Base):
    """Sales-team member who logs calls and emails."""

    __tablename__ = "employees"
    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    role = Column(String(100))
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user = relationship("User", back_populates="employee", uselist=False)
    activities = relationship(
        "Activity", back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )


class Activity(Base):
    """A single logged call or email with a company."""

    __tablename__ = "activities"
    id = Column(String(64), primary_key=True, default=_new_id)
    company_id = Column(
        String(64), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    employee_id = Column(
        String(64), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    type = Column(String(20), nullable=False)  # call | email
    answered = Column(Boolean, default=False)
    interested = Column(Boolean, default=False)
    follow_up = Column(Boolean, default=False)
    notes = Column(Text)
    date = Column(Date, nullable=False)  # business date, not created_at
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    company = relationship("Company", back_populates="activities")
    employee = relationship("Employee", back_populates="activities")

    __table_args__ = (
        Index("ix_activities_company", "company_id"),
        Index("ix_activities_employee_date", "employee_id", "date"),
        Index("ix_activities_date", "date"),
    )
