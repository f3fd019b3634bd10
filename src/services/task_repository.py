"""Task persistence on top of the Supabase ``tasks`` table.

Derived fields are recomputed by the scoring engine on every create and
update, so stored rows always agree with their status, priority, urgency
and due date.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from supabase import Client
from ulid import ULID

from src.models.query import Pagination, TaskQueryOptions
from src.models.task import Task, TaskCreate, TaskStatistics, TaskUpdate
from src.services.query_builder import apply_conditions, apply_plan, build_count_query, build_query, paginate
from src.services.scoring import compute_derived_fields
from src.services.statistics import compute_statistics
from src.services.supabase_client import SupabaseClient, get_supabase_client
from src.utils.errors import SupabaseError, TaskNotFoundError
from src.utils.logging import get_structured_logger, log_timing, mask_user_id, timed

logger = get_structured_logger(__name__)

TASKS_TABLE = "tasks"


def generate_task_id() -> str:
    """Generate a text-based task ID (ULID format)."""
    return str(ULID())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TaskPage:
    """One page of tasks plus the metadata describing how it was selected."""

    def __init__(self, tasks: list[Task], pagination: Pagination, filters: dict, sorting: dict):
        self.tasks = tasks
        self.pagination = pagination
        self.filters = filters
        self.sorting = sorting

    def to_response(self) -> dict:
        return {
            "success": True,
            "data": [task.to_response() for task in self.tasks],
            "pagination": self.pagination.model_dump(),
            "filters": self.filters,
            "sorting": self.sorting,
        }


class TaskRepository:
    """Storage access for tasks. The Supabase client is injected."""

    def __init__(self, client: Client, clock: Callable[[], datetime] = utc_now):
        self.client = client
        self.clock = clock

    async def create(self, payload: TaskCreate, user_id: str) -> Task:
        """Insert a new task owned by ``user_id``."""
        row = payload.model_dump(mode="json")
        derived = compute_derived_fields(row, now=self.clock())
        row.update({
            "id": generate_task_id(),
            "user_id": user_id,
            "completion_percentage": derived.completion_percentage,
            "priority_score": derived.priority_score,
        })

        async with SupabaseClient(self.client) as client:
            try:
                with log_timing("task.create", logger=logger, user_id=mask_user_id(user_id)):
                    result = client.table(TASKS_TABLE).insert(row).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to create task: {e}") from e

        if not result.data:
            raise SupabaseError("Failed to create task: no data returned")

        task = Task.model_validate(result.data[0])
        logger.info(
            "Task created",
            task_id=task.id,
            status=task.status,
            priority_score=task.priority_score,
        )
        return task

    async def get(self, task_id: str) -> Optional[Task]:
        """Fetch a task by ID, or None."""
        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(TASKS_TABLE).select("*").eq("id", task_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to get task: {e}") from e
        return Task.model_validate(result.data[0]) if result.data else None

    async def find_all(self, options: TaskQueryOptions) -> TaskPage:
        """Filtered, sorted page of an owner's tasks."""
        plan = build_query(options)
        count_plan = build_count_query(options)

        async with SupabaseClient(self.client) as client:
            try:
                with log_timing(
                    "task.list",
                    logger=logger,
                    sort_by=plan.sorting["sort_by"],
                    page=plan.page,
                ):
                    rows = apply_plan(client.table(TASKS_TABLE).select("*"), plan).execute()
                    counted = apply_conditions(
                        client.table(TASKS_TABLE).select("id", count="exact"),
                        count_plan.conditions,
                    ).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to list tasks: {e}") from e

        total = counted.count if counted.count is not None else len(counted.data or [])
        return TaskPage(
            tasks=[Task.model_validate(row) for row in rows.data or []],
            pagination=paginate(total, plan),
            filters=plan.filters,
            sorting=plan.sorting,
        )

    async def update(self, task_id: str, payload: TaskUpdate) -> Task:
        """Apply a partial update and recompute derived fields."""
        existing = await self.get(task_id)
        if existing is None:
            raise TaskNotFoundError(f"Task {task_id} does not exist")

        changes = payload.changes()
        merged = {**existing.model_dump(mode="json"), **changes}
        derived = compute_derived_fields(merged, now=self.clock())
        updates = {
            **changes,
            "completion_percentage": derived.completion_percentage,
            "priority_score": derived.priority_score,
            "updated_at": self.clock().isoformat(),
        }

        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(TASKS_TABLE).update(updates).eq("id", task_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to update task: {e}") from e

        if not result.data:
            raise SupabaseError(f"Failed to update task: {task_id}")

        logger.info("Task updated", task_id=task_id, fields=sorted(changes))
        return Task.model_validate(result.data[0])

    async def delete(self, task_id: str) -> bool:
        """Permanently delete a task. Returns False if nothing was deleted."""
        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(TASKS_TABLE).delete().eq("id", task_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to delete task: {e}") from e

        deleted = bool(result.data)
        if deleted:
            logger.info("Task deleted", task_id=task_id)
        return deleted

    async def all_for_user(self, user_id: str) -> list[Task]:
        async with SupabaseClient(self.client) as client:
            try:
                result = client.table(TASKS_TABLE).select("*").eq("user_id", user_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to get tasks: {e}") from e
        return [Task.model_validate(row) for row in result.data or []]

    @timed("task.statistics", logger=logger)
    async def statistics(self, user_id: str) -> TaskStatistics:
        return compute_statistics(await self.all_for_user(user_id))


def get_task_repository() -> TaskRepository:
    """Task repository bound to the shared Supabase client."""
    return TaskRepository(get_supabase_client())
