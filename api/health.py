"""Health check endpoint."""

from src.utils.config import AppConfig
from src.utils.http import JSONRequestHandler


def health_payload() -> dict:
    return {
        "status": "ok",
        "service": AppConfig.SERVICE_NAME,
        "storage_configured": bool(AppConfig.SUPABASE_URL and AppConfig.SUPABASE_SERVICE_ROLE_KEY),
        "auth_configured": bool(AppConfig.JWT_SECRET.strip()),
    }


class handler(JSONRequestHandler):
    """Health check handler for Vercel serverless function.

    Reports whether the storage and token settings are present; it never
    contacts Supabase.
    """

    def do_GET(self):
        self.send_json(200, health_payload())

    def do_POST(self):
        """Same as GET for health check."""
        self.do_GET()
