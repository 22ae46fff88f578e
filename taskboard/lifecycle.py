"""Task status lifecycle and field rules.

Statuses are a closed set of labels. Any label may be set from any other;
the PENDING -> IN_PROGRESS -> DONE -> ARCHIVED -> PENDING cycle is only the
order clients step through and is exposed through ``next_status``.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from .errors import ValidationError
from .models import Task, TaskStatus

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000

EDITABLE_FIELDS = ("title", "description", "status")

_CYCLE = {
    TaskStatus.PENDING: TaskStatus.IN_PROGRESS,
    TaskStatus.IN_PROGRESS: TaskStatus.DONE,
    TaskStatus.DONE: TaskStatus.ARCHIVED,
    TaskStatus.ARCHIVED: TaskStatus.PENDING,
}

_STATUS_HELP = "Valid status is required ({})".format(", ".join(s.value for s in TaskStatus))


def parse_status(value: Union[TaskStatus, str, None]) -> TaskStatus:
    """Return the matching ``TaskStatus`` or raise ``ValidationError``."""
    if isinstance(value, TaskStatus):
        return value
    if isinstance(value, str):
        try:
            return TaskStatus(value)
        except ValueError:
            pass
    raise ValidationError(_STATUS_HELP)


def next_status(current: Union[TaskStatus, str]) -> TaskStatus:
    return _CYCLE[parse_status(current)]


def clean_title(title: Optional[str]) -> str:
    if title is None or not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
    return title


def clean_description(description: Optional[str]) -> Optional[str]:
    """Trim a description; blank or missing becomes ``None``."""
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValidationError("Description must be a string")
    description = description.strip()
    if not description:
        return None
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")
    return description


def normalize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a partial edit and return the cleaned values.

    Every key is checked before anything is applied, so a rejected edit
    leaves the task untouched.
    """
    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError("Cannot update field(s): {}".format(", ".join(unknown)))

    cleaned: Dict[str, Any] = {}
    if "title" in changes:
        cleaned["title"] = clean_title(changes["title"])
    if "description" in changes:
        cleaned["description"] = clean_description(changes["description"])
    if "status" in changes:
        cleaned["status"] = parse_status(changes["status"])
    return cleaned


def apply_changes(task: Task, changes: Dict[str, Any], now: datetime) -> Task:
    cleaned = normalize_changes(changes)
    for field, value in cleaned.items():
        setattr(task, field, value)
    # Refreshed even when nothing changed.
    task.updated_at = now
    return task


def apply_status(task: Task, status: Union[TaskStatus, str], now: datetime) -> Task:
    task.status = parse_status(status)
    task.updated_at = now
    return task
