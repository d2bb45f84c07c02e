"""
dependencies.py — Shared FastAPI Dependencies

Reusable dependency functions for authentication and authorization.
All routers import from here instead of defining their own auth logic.
Logging in (issuing the session) is handled outside this service; these
dependencies only read the signed session cookie.

Business Rules:
- get_user returns None if not logged in (non-throwing)
- require_user raises 401 if not logged in, 403 if deactivated
- require_admin raises 403 if user.role != "admin"

Called by: all routers
Depends on: models, database
"""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .database import get_db
from .models import User


def get_user(request: Request, db: Session) -> User | None:
    """Return current user from session, or None if not logged in."""
    uid = request.session.get("user_id")
    if not uid:
        return None
    return db.get(User, uid)


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency: raises 401 if no authenticated user, 403 if deactivated."""
    user = get_user(request, db)
    if not user:
        raise HTTPException(401, "Not authenticated")
    if not getattr(user, "is_active", True):
        request.session.clear()
        raise HTTPException(403, "Account deactivated — contact admin")
    return user


def is_admin(user: User) -> bool:
    """Check if user has admin privileges (by role)."""
    return user.role == "admin"


def require_admin(user: User = Depends(require_user)) -> User:
    """Dependency: raises 403 if user is not an admin."""
    if not is_admin(user):
        raise HTTPException(403, "Admin access required")
    return user
