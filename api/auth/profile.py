"""Profile endpoint for the authenticated user."""

from src.models.user import UserUpdate
from src.services.auth import authenticate_request, update_profile
from src.services.user_repository import get_user_repository
from src.utils.errors import RequestValidationError
from src.utils.http import JSONRequestHandler, parse_model
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()


class handler(JSONRequestHandler):
    """Vercel serverless function handler for /api/auth/profile."""

    def do_GET(self):
        async def action():
            user = await authenticate_request(self.headers.get("Authorization"), get_user_repository())
            return 200, {"success": True, "data": user.to_response()}

        self.dispatch(action)

    def do_PUT(self):
        async def action():
            users = get_user_repository()
            user = await authenticate_request(self.headers.get("Authorization"), users)
            payload = parse_model(UserUpdate, self.read_json())
            if not payload.changes():
                raise RequestValidationError(
                    "Provide an email or password to update", error="No updates provided"
                )
            updated = await update_profile(user, payload, users)
            return 200, {
                "success": True,
                "message": "Profile updated successfully",
                "data": updated.to_response(),
            }

        self.dispatch(action)
