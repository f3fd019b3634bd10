"""Single task endpoint: /api/tasks/item?id=<task_id>."""

import re

from src.models.task import TaskUpdate
from src.services.auth import authenticate_request, require_ownership
from src.services.task_repository import get_task_repository
from src.services.user_repository import get_user_repository
from src.utils.errors import RequestValidationError, TaskNotFoundError
from src.utils.http import JSONRequestHandler, parse_model
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()

TASK_ID_PATTERN = re.compile(r"[A-Za-z0-9-]+")


class handler(JSONRequestHandler):
    """Vercel serverless function handler for a single task."""

    def _task_id(self) -> str:
        task_id = self.query_params().get("id", "")
        if not TASK_ID_PATTERN.fullmatch(task_id):
            raise RequestValidationError(
                "Task ID must be a ULID or alphanumeric string",
                details=[{"field": "id", "message": "Invalid task ID", "value": task_id}],
            )
        return task_id

    async def _owned_task(self, repository):
        user = await authenticate_request(self.headers.get("Authorization"), get_user_repository())
        task_id = self._task_id()
        return require_ownership(await repository.get(task_id), user)

    def do_GET(self):
        async def action():
            task = await self._owned_task(get_task_repository())
            return 200, {"success": True, "data": task.to_response()}

        self.dispatch(action)

    def do_PUT(self):
        async def action():
            repository = get_task_repository()
            task = await self._owned_task(repository)
            payload = parse_model(TaskUpdate, self.read_json())
            updated = await repository.update(task.id, payload)
            return 200, {
                "success": True,
                "message": "Task updated successfully",
                "data": updated.to_response(),
            }

        self.dispatch(action)

    def do_DELETE(self):
        async def action():
            repository = get_task_repository()
            task = await self._owned_task(repository)
            if not await repository.delete(task.id):
                raise TaskNotFoundError("The specified task does not exist")
            return 200, {"success": True, "message": "Task deleted successfully"}

        self.dispatch(action)
