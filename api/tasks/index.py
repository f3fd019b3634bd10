"""Task collection endpoint: list (GET) and create (POST)."""

from src.models.query import TaskListParams
from src.models.task import TaskCreate
from src.services.auth import authenticate_request
from src.services.task_repository import get_task_repository
from src.services.user_repository import get_user_repository
from src.utils.http import JSONRequestHandler, parse_model
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(JSONRequestHandler):
    """Vercel serverless function handler for /api/tasks."""

    def do_GET(self):
        """List the caller's tasks with filters, sorting and pagination."""
        async def action():
            user = await authenticate_request(self.headers.get("Authorization"), get_user_repository())
            params = TaskListParams.from_query_params(self.query_params())
            page = await get_task_repository().find_all(params.to_options(user.id))
            return 200, page.to_response()

        self.dispatch(action)

    def do_POST(self):
        """Create a task owned by the caller."""
        async def action():
            user = await authenticate_request(self.headers.get("Authorization"), get_user_repository())
            payload = parse_model(TaskCreate, self.read_json())
            task = await get_task_repository().create(payload, user.id)
            return 201, {
                "success": True,
                "message": "Task created successfully",
                "data": task.to_response(),
            }

        self.dispatch(action)
