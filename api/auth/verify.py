"""Token verification endpoint."""

from src.services.auth import authenticate_request
from src.services.user_repository import get_user_repository
from src.utils.http import JSONRequestHandler
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(JSONRequestHandler):
    """Vercel serverless function handler for /api/auth/verify."""

    def do_POST(self):
        async def action():
            user = await authenticate_request(self.headers.get("Authorization"), get_user_repository())
            return 200, {
                "success": True,
                "message": "Token is valid",
                "data": user.to_response(),
            }

        self.dispatch(action)
