"""String enums for domain models.

Columns store the plain ``.value`` strings; the enums exist so that service
code never spells a status or priority literal twice.
"""

import enum


# ── Tasks ─────────────────────────────────────────────────────────────────────


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    WAITING = "waiting"
    DONE = "done"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_TASK_STATUSES = (
    TaskStatus.DONE.value,
    TaskStatus.COMPLETED.value,
    TaskStatus.CANCELLED.value,
)


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# ── Approvals ─────────────────────────────────────────────────────────────────


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    INFO_REQUESTED = "info_requested"


class ApprovalUrgency(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Shared ordering for task priority and approval urgency (higher sorts first)
SEVERITY_RANK: dict[str, int] = {
    "urgent": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
}


# ── Meetings ──────────────────────────────────────────────────────────────────


class MeetingStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


class LocationType(str, enum.Enum):
    VIRTUAL = "virtual"
    IN_PERSON = "in_person"
    PHONE = "phone"
    HYBRID = "hybrid"


# ── AI ────────────────────────────────────────────────────────────────────────


class InsightType(str, enum.Enum):
    CONFLICT = "conflict"
    REMINDER = "reminder"
    SUGGESTION = "suggestion"
    PREPARATION = "preparation"
    DAILY_BRIEF = "daily_brief"


class InsightPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class InsightStatus(str, enum.Enum):
    ACTIVE = "active"
    DISMISSED = "dismissed"
    ACTIONED = "actioned"
    EXPIRED = "expired"
