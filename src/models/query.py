"""Task listing query models."""

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.models.task import TaskPriority, TaskStatus
from src.utils.config import AppConfig
from src.utils.errors import RequestValidationError

SORTABLE_FIELDS = (
    "title",
    "status",
    "priority",
    "due_date",
    "created_at",
    "updated_at",
    "completion_percentage",
    "priority_score",
)


class TaskQueryOptions(BaseModel):
    """Raw listing options handed to the query builder.

    Values here are not trusted: the builder falls back to defaults for
    anything it does not recognise.
    """
    user_id: str
    page: Any = 1
    limit: Any = Field(default_factory=lambda: AppConfig.DEFAULT_PAGE_SIZE)
    status: Optional[str] = None
    priority: Optional[str] = None
    is_urgent: Optional[bool] = None
    search: Optional[str] = None
    sort_by: Optional[str] = "created_at"
    sort_order: Optional[str] = "DESC"


class TaskListParams(BaseModel):
    """Validated query-string parameters for the task list endpoint."""
    model_config = ConfigDict(str_strip_whitespace=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: AppConfig.DEFAULT_PAGE_SIZE, ge=1)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    is_urgent: Optional[bool] = None
    search: Optional[str] = Field(None, min_length=1, max_length=100)
    sort_by: Literal[SORTABLE_FIELDS] = "created_at"
    sort_order: Literal["ASC", "DESC"] = "DESC"

    @field_validator("is_urgent", mode="before")
    @classmethod
    def parse_is_urgent(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.lower()
            if lowered in ("true", "1"):
                return True
            if lowered in ("false", "0"):
                return False
            raise ValueError("is_urgent must be a boolean value")
        return value

    @field_validator("limit")
    @classmethod
    def limit_within_max(cls, value: int) -> int:
        if value > AppConfig.MAX_PAGE_SIZE:
            raise ValueError(f"Limit must be between 1 and {AppConfig.MAX_PAGE_SIZE}")
        return value

    @field_validator("sort_order", mode="before")
    @classmethod
    def upper_sort_order(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_query_params(cls, params: dict[str, str]) -> "TaskListParams":
        """Validate a parsed query string, raising RequestValidationError on bad input."""
        known = {key: value for key, value in params.items() if key in cls.model_fields and value != ""}
        try:
            return cls.model_validate(known)
        except ValidationError as e:
            raise RequestValidationError(
                "Please check your input data",
                details=validation_details(e)
            )

    def to_options(self, user_id: str) -> TaskQueryOptions:
        return TaskQueryOptions(user_id=user_id, **self.model_dump(mode="json"))


class Condition(BaseModel):
    """A single WHERE condition.

    ``eq`` targets exactly one field. ``ilike`` matches a substring
    case-insensitively against any of ``fields`` (OR).
    """
    fields: tuple[str, ...]
    op: Literal["eq", "ilike"]
    value: Any


class OrderBy(BaseModel):
    field: str
    direction: Literal["ASC", "DESC"]

    @property
    def descending(self) -> bool:
        return self.direction == "DESC"


class QueryPlan(BaseModel):
    """Bounded query against the tasks table plus the effective options."""
    conditions: list[Condition]
    order: OrderBy
    page: int
    limit: int
    offset: int
    filters: dict[str, Any]
    sorting: dict[str, str]


class CountPlan(BaseModel):
    """Count query paired with a QueryPlan: same conditions, no ordering or paging."""
    conditions: list[Condition]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


def validation_details(error: ValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic ValidationError into field/message pairs."""
    details = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or None
        details.append({
            "field": field,
            "message": item.get("msg"),
            "value": item.get("input") if not isinstance(item.get("input"), dict) else None,
        })
    return details
