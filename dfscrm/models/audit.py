"""Audit log — who changed what, for admin review."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String

from .base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    action_type = Column(String(50), nullable=False)  # link | unlink | delete | update
    entity_type = Column(String(50), nullable=False)  # company | employee | activity | setting
    entity_id = Column(String(64))
    details = Column(JSON)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (Index("ix_audit_entity", "entity_type", "entity_id"),)
