"""Shared request plumbing for the Vercel function handlers."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Callable, Optional, Type
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel, ValidationError

from src.models.query import validation_details
from src.utils.errors import RequestValidationError, TaskManagerError
from src.utils.logging import correlation_context, get_structured_logger, mask_sensitive_data
from src.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


def parse_model(model: Type[BaseModel], data: Any) -> Any:
    """Validate ``data`` against ``model``, raising RequestValidationError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError("Please check your input data", details=validation_details(e))


class JSONRequestHandler(BaseHTTPRequestHandler):
    """BaseHTTPRequestHandler with JSON helpers and error mapping."""

    def query_params(self) -> dict[str, str]:
        return dict(parse_qsl(urlsplit(self.path).query, keep_blank_values=True))

    def read_json(self) -> dict[str, Any]:
        try:
            content_length = int(self.headers.get('Content-Length', 0) or 0)
        except ValueError:
            raise RequestValidationError("Content-Length must be an integer")
        if content_length <= 0:
            return {}
        try:
            body = json.loads(self.rfile.read(content_length).decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise RequestValidationError("Request body must be valid JSON")
        if not isinstance(body, dict):
            raise RequestValidationError("Request body must be a JSON object")
        return body

    def send_json(self, status: int, payload: dict[str, Any], headers: Optional[dict[str, str]] = None) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(json.dumps(payload, default=str).encode('utf-8'))

    def dispatch(self, action: Callable[[], Any]) -> None:
        """Run an async action inside a correlation context and map errors.

        ``action`` returns ``(status, payload)``.
        """
        header_id = self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)
        with correlation_context(header_id) as correlation_id:
            response_headers = {LoggingConfig.LOG_CORRELATION_ID_HEADER: correlation_id}
            try:
                status, payload = asyncio.run(action())
            except TaskManagerError as e:
                if e.status_code >= 500:
                    logger.error(f"Request failed: {e.message}", exc_info=True, path=self.path)
                else:
                    logger.info(f"Request rejected: {e.error}", status_code=e.status_code, path=self.path)
                self.send_json(e.status_code, e.to_response(), headers=response_headers)
                return
            except Exception as e:
                logger.error(f"Unhandled error: {e}", exc_info=True, path=self.path)
                self.send_json(
                    500,
                    {"error": "Internal server error", "message": "An unexpected error occurred"},
                    headers=response_headers,
                )
                return
            self.send_json(status, payload, headers=response_headers)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(mask_sensitive_data(format % args), client=self.address_string())
