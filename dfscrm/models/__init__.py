"""Database models — re-exports all models.

Import from here:  from dfscrm.models import Company, Activity, ...
Or from submodules: from dfscrm.models.crm import Company
"""

from .base import Base  # noqa: F401

# Auth & Users
from .auth import User  # noqa: F401

# CRM: Companies, Employees, Activities
from .crm import Activity, Company, Employee  # noqa: F401

# Audit trail
from .audit import AuditLog  # noqa: F401

# Admin-editable settings
from .settings import Setting  # noqa: F401
