"""Task statistics endpoint for the authenticated user."""

from src.services.auth import authenticate_request
from src.services.task_repository import get_task_repository
from src.services.user_repository import get_user_repository
from src.utils.http import JSONRequestHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(JSONRequestHandler):
    """Vercel serverless function handler for /api/tasks/statistics."""

    def do_GET(self):
        async def action():
            user = await authenticate_request(self.headers.get("Authorization"), get_user_repository())
            statistics = await get_task_repository().statistics(user.id)
            return 200, {"success": True, "data": statistics.model_dump()}

        self.dispatch(action)
