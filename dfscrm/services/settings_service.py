"""
services/settings_service.py — Admin-editable settings (call script, etc.)

Values are any JSON document, stored as text in the settings table.

Business Rules:
- Any logged-in user can read a setting; only admins write (router enforces)
- Writes upsert: an unknown key is created on first write
- Every write leaves an AuditLog row (action "update", entity "setting")
- Known keys fall back to their built-in default until an admin saves one
- A stored value that is not valid JSON is returned as raw text, with a warning

Called by: routers/settings.py, alembic/versions/002_settings.py (defaults)
Depends on: models (Setting, AuditLog)
"""

import json
from datetime import datetime, timezone

from loguru import logger
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import AuditLog, Setting, User

CALL_SCRIPT_KEY = "call_script"

DEFAULT_CALL_SCRIPT = {
    "company": "Delaware Fence Solutions",
    "introduction": (
        "Hi, this is [Your Name] from Delaware Fence Solutions. We're a local fence "
        "company specializing in high-quality installations for contractors and "
        "property managers."
    ),
    "opening": (
        "I'm reaching out because we work with contractors like [Company Name] to "
        "provide reliable fencing solutions for your projects."
    ),
    "products": [
        {"name": "Vinyl Fencing", "description": "Low maintenance, 20+ year warranty"},
        {"name": "Wood Fencing", "description": "Cedar and pine options, custom designs"},
        {"name": "Chain Link", "description": "Commercial grade, galvanized"},
        {"name": "Aluminum", "description": "Decorative and pool code compliant"},
        {"name": "Tools & Materials", "description": "Gates, posts, hardware, repair kits"},
    ],
    "value_prop": (
        "We offer competitive contractor pricing, quick turnaround times, and we "
        "handle everything from permits to installation."
    ),
    "questions": [
        "Do you currently work with any fence suppliers?",
        "What types of fencing projects do you typically handle?",
        "Would you be interested in learning about our contractor discount program?",
    ],
    "cta": (
        "I'd love to schedule a brief meeting to show you our product catalog and "
        "discuss how we can support your upcoming projects. Would next week work for you?"
    ),
}

DEFAULT_SETTINGS = {CALL_SCRIPT_KEY: DEFAULT_CALL_SCRIPT}


def _decode(row: Setting):
    try:
        return json.loads(row.value)
    except (TypeError, ValueError):
        logger.warning("Setting {} holds non-JSON text; returning it raw", row.key)
        return row.value


def _as_dict(row: Setting) -> dict:
    return {
        "key": row.key,
        "value": _decode(row),
        "updated_by": row.updated_by,
        "updated_at": row.updated_at,
    }


def get_setting(db: Session, key: str) -> dict:
    row = db.get(Setting, key)
    if row is not None:
        return _as_dict(row)
    if key in DEFAULT_SETTINGS:
        return {"key": key, "value": DEFAULT_SETTINGS[key], "updated_by": None, "updated_at": None}
    raise NotFoundError(f"Setting {key} not found")


def set_setting(db: Session, key: str, value, user: User | None = None) -> dict:
    """Create or replace a setting and audit the change."""
    row = db.get(Setting, key)
    created = row is None
    if created:
        row = Setting(key=key)
        db.add(row)
    row.value = json.dumps(value)
    row.updated_by = user.id if user else None
    row.updated_at = datetime.now(timezone.utc)
    db.add(
        AuditLog(
            user_id=user.id if user else None,
            action_type="update",
            entity_type="setting",
            entity_id=key,
            details={"created": created},
        )
    )
    db.commit()
    db.refresh(row)
    logger.info("Setting {} {} by user {}", key, "created" if created else "updated", row.updated_by)
    return _as_dict(row)

