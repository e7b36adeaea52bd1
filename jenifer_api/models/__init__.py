"""SQLAlchemy models package — import all models so Base.metadata is populated."""

from jenifer_api.models.ai import AIInsight, AIPattern
from jenifer_api.models.base import BaseModel, ModelMixin, OrgScopedMixin
from jenifer_api.models.contacts import Contact
from jenifer_api.models.core import ExecutiveProfile, Organization, User
from jenifer_api.models.key_dates import KeyDate
from jenifer_api.models.meetings import Meeting
from jenifer_api.models.tasks import Approval, Task

__all__ = [
    "AIInsight",
    "AIPattern",
    "Approval",
    "BaseModel",
    "Contact",
    "ExecutiveProfile",
    "KeyDate",
    "Meeting",
    "ModelMixin",
    "OrgScopedMixin",
    "Organization",
    "Task",
    "User",
]
