"""User login endpoint."""

from src.models.user import UserLogin
from src.services.auth import login
from src.services.user_repository import get_user_repository
from src.utils.http import JSONRequestHandler, parse_model
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(JSONRequestHandler):
    """Vercel serverless function handler for /api/auth/login."""

    def do_POST(self):
        async def action():
            credentials = parse_model(UserLogin, self.read_json())
            user, token = await login(credentials, get_user_repository())
            return 200, {
                "success": True,
                "message": "Login successful",
                "data": user.to_response(),
                "token": token,
            }

        self.dispatch(action)
