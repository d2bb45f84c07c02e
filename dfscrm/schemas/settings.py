"""
schemas/settings.py — Admin-editable settings payloads

Called by: routers/settings.py
Depends on: pydantic
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class SettingUpdate(BaseModel):
    value: Any


class SettingOut(BaseModel):
    key: str
    value: Any
    updated_by: int | None = None
    updated_at: datetime | None = None
