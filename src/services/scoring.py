"""Derived task fields: completion percentage and priority score.

Both values are computed at write time and stored with the task. Every
function here is pure; the only environmental input is the current time,
which callers may pass in as ``now`` to get reproducible results.
"""

import math
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, NamedTuple, Optional

COMPLETION_BY_STATUS = {
    "TODO": 0,
    "IN_PROGRESS": 50,
    "COMPLETED": 100,
    "CANCELLED": 0,
}

PRIORITY_WEIGHTS = {
    "LOW": 10,
    "MEDIUM": 25,
    "HIGH": 40,
    "URGENT": 60,
}
DEFAULT_PRIORITY_WEIGHT = 25

URGENT_FLAG_BONUS = 20

# (max days until due, bonus); overdue is handled separately
DUE_DATE_BONUSES = (
    (1, 35),
    (3, 25),
    (7, 15),
)
OVERDUE_BONUS = 40
DISTANT_DUE_BONUS = 5

MAX_SCORE = 100

SECONDS_PER_DAY = 86400


class DerivedFields(NamedTuple):
    completion_percentage: int
    priority_score: int


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _lookup(table: dict, key: Any, default: int) -> int:
    try:
        return table.get(_enum_value(key), default)
    except TypeError:
        # unhashable input
        return default


def _field(task: Any, name: str, default: Any = None) -> Any:
    if isinstance(task, dict):
        return task.get(name, default)
    return getattr(task, name, default)


def _as_utc(value: Any) -> Optional[datetime]:
    """Coerce a due date to an aware UTC datetime, or None if it can't be read."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return None


def completion_percentage(status: Any) -> int:
    """Completion percentage for a status; unknown statuses count as 0."""
    return _lookup(COMPLETION_BY_STATUS, status, 0)


def days_until_due(due_date: Any, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days from ``now`` until ``due_date``, floored (overdue is negative)."""
    due = _as_utc(due_date)
    if due is None:
        return None
    current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return math.floor((due - current).total_seconds() / SECONDS_PER_DAY)


def due_date_bonus(due_date: Any, now: Optional[datetime] = None) -> int:
    days = days_until_due(due_date, now)
    if days is None:
        return 0
    if days < 0:
        return OVERDUE_BONUS
    for max_days, bonus in DUE_DATE_BONUSES:
        if days <= max_days:
            return bonus
    return DISTANT_DUE_BONUS


def priority_score(
    priority: Any,
    is_urgent: bool = False,
    due_date: Any = None,
    now: Optional[datetime] = None
) -> int:
    """Priority score in the range 0-100.

    Sum of the priority weight, the urgency bonus and the due-date bonus,
    capped at 100. Unknown priorities weigh the same as MEDIUM.
    """
    score = _lookup(PRIORITY_WEIGHTS, priority, DEFAULT_PRIORITY_WEIGHT)
    if is_urgent:
        score += URGENT_FLAG_BONUS
    score += due_date_bonus(due_date, now)
    return max(0, min(score, MAX_SCORE))


def compute_derived_fields(task: Any, now: Optional[datetime] = None) -> DerivedFields:
    """Compute both derived fields for a task model or a plain dict."""
    return DerivedFields(
        completion_percentage=completion_percentage(_field(task, "status")),
        priority_score=priority_score(
            _field(task, "priority"),
            is_urgent=bool(_field(task, "is_urgent", False)),
            due_date=_field(task, "due_date"),
            now=now,
        ),
    )
