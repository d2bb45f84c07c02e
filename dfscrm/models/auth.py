"""Auth & user models."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), default="user")  # user | admin
    is_active = Column(Boolean, default=True)

    # Explicit link to the sales-team record. Legacy rows were linked by
    # matching display name; see crm_service.backfill_user_employee_links.
    employee_id = Column(String(64), ForeignKey("employees.id", ondelete="SET NULL"))

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    employee = relationship("Employee", back_populates="user")

    __table_args__ = (Index("ix_users_employee", "employee_id", unique=True),)
