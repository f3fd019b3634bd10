"""Per-owner task statistics."""

import math
from typing import Any, Iterable

from src.models.task import TaskStatistics, TaskStatus


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _get(task: Any, name: str, default: Any = None) -> Any:
    if isinstance(task, dict):
        return task.get(name, default)
    return getattr(task, name, default)


def _status(task: Any) -> Any:
    status = _get(task, "status")
    return getattr(status, "value", status)


def compute_statistics(tasks: Iterable[Any]) -> TaskStatistics:
    """Counts, averages and completion rate over one owner's tasks.

    An empty collection yields all zeros, including the completion rate.
    """
    tasks = list(tasks)
    total = len(tasks)
    if total == 0:
        return TaskStatistics()

    statuses = [_status(task) for task in tasks]
    completed = statuses.count(TaskStatus.COMPLETED.value)
    completion_sum = sum(_get(task, "completion_percentage", 0) or 0 for task in tasks)
    score_sum = sum(_get(task, "priority_score", 0) or 0 for task in tasks)

    return TaskStatistics(
        total_tasks=total,
        completed_tasks=completed,
        in_progress_tasks=statuses.count(TaskStatus.IN_PROGRESS.value),
        pending_tasks=statuses.count(TaskStatus.TODO.value),
        urgent_tasks=sum(1 for task in tasks if _get(task, "is_urgent")),
        avg_completion=round_half_up(completion_sum / total),
        avg_priority_score=round_half_up(score_sum / total),
        completion_rate=round_half_up(completed / total * 100),
    )
