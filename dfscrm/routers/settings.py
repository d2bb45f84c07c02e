"""
routers/settings.py — Admin-editable settings (call script)

Business Rules:
- GET is open to any logged-in user (salespeople read the call script)
- PUT is admin-only and audited

Called by: main.py (router mount)
Depends on: services/settings_service.py, schemas/settings.py
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_admin, require_user
from ..models import User
from ..schemas.settings import SettingOut, SettingUpdate
from ..services import settings_service

router = APIRouter(tags=["settings"])


@router.get("/api/settings/{key}", response_model=SettingOut)
async def get_setting(
    key: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return settings_service.get_setting(db, key)


@router.put("/api/settings/{key}", response_model=SettingOut)
async def put_setting(
    key: str,
    payload: SettingUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return settings_service.set_setting(db, key, payload.value, user)
