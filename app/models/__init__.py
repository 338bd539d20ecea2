"""SQLAlchemy models package for the Agency PM backend.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` runs.
The import order follows the foreign-key dependency graph so that parent
tables are always registered before their children.

Usage from other modules:
    from app.models import Project, MonthlyAdvertisingSpend
"""

# Tenancy and identity
from app.models.organization import Organization  # noqa: F401
from app.models.user import User  # noqa: F401

# Projects
from app.models.project import Project, ProjectMember  # noqa: F401
from app.models.project_month import ProjectMonth  # noqa: F401

# Advertising budgets
from app.models.monthly_advertising_spend import MonthlyAdvertisingSpend  # noqa: F401

__all__ = [
    "Organization",
    "User",
    "Project",
    "ProjectMember",
    "ProjectMonth",
    "MonthlyAdvertisingSpend",
]
