"""Task models."""

from enum import Enum
from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    """Task lifecycle status."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    """Task priority level."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Task(BaseModel):
    """Persisted task record."""
    id: str = Field(..., description="Task ID (ULID string)")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    status: str = Field(default=TaskStatus.TODO.value, description="Status: TODO, IN_PROGRESS, COMPLETED, CANCELLED")
    priority: str = Field(default=TaskPriority.MEDIUM.value, description="Priority: LOW, MEDIUM, HIGH, URGENT")
    is_urgent: bool = Field(default=False, description="Urgency flag")
    due_date: Optional[datetime] = Field(None, description="Due date")
    completion_percentage: int = Field(default=0, ge=0, le=100, description="Derived from status")
    priority_score: int = Field(default=0, ge=0, le=100, description="Derived from priority, urgency and due date")
    user_id: str = Field(..., description="Owner user ID")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_response(self) -> dict[str, Any]:
        """Task data for API responses."""
        return self.model_dump(mode="json")


class TaskCreate(BaseModel):
    """Payload for creating a task."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    is_urgent: bool = False
    due_date: Optional[datetime] = None


class TaskUpdate(BaseModel):
    """Partial update payload; only fields that were sent are applied."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    is_urgent: Optional[bool] = None
    due_date: Optional[datetime] = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly provided by the caller.

        ``description`` and ``due_date`` may be cleared with an explicit null;
        the remaining fields are not nullable, so a null there is ignored.
        """
        nullable = {"description", "due_date"}
        return {
            key: value
            for key, value in self.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or key in nullable
        }


class TaskStatistics(BaseModel):
    """Aggregate statistics over one owner's tasks."""
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    pending_tasks: int = 0
    urgent_tasks: int = 0
    avg_completion: int = 0
    avg_priority_score: int = 0
    completion_rate: int = 0
