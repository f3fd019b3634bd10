"""User registration endpoint."""

from src.models.user import UserCreate
from src.services.auth import register
from src.services.user_repository import get_user_repository
from src.utils.http import JSONRequestHandler, parse_model
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(JSONRequestHandler):
    """Vercel serverless function handler for /api/auth/register."""

    def do_POST(self):
        async def action():
            payload = parse_model(UserCreate, self.read_json())
            user, token = await register(payload, get_user_repository())
            return 201, {
                "success": True,
                "message": "User registered successfully",
                "data": user.to_response(),
                "token": token,
            }

        self.dispatch(action)
