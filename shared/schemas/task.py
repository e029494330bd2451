"""
Task data schemas for Task Desk
"""

from typing import Optional, Dict, Any
from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, field_validator

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000


class TaskStatus(str, Enum):
    """Task status enumeration"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority enumeration"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _clean_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError("Description is too long")
    return value or None


class TaskSchema(BaseModel):
    """Row of the tasks table"""
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TaskCreateSchema(BaseModel):
    """Schema for creating a task"""
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        v = (v or '').strip()
        if not v:
            raise ValueError('Title is required')
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError('Title is too long')
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        return _clean_description(v)

    def to_record(self) -> Dict[str, Any]:
        """Serialize for the backend insert"""
        return self.model_dump(mode='json')


class TaskUpdateSchema(BaseModel):
    """Schema for updating a task; unset fields are left untouched"""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Title is required')
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError('Title is too long')
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        return _clean_description(v)

    def to_record(self) -> Dict[str, Any]:
        """Serialize for the backend update"""
        data = self.model_dump(mode='json', exclude_unset=True)
        # Non-nullable columns are only sent when a value was given
        for key in ('title', 'status', 'priority'):
            if data.get(key) is None:
                data.pop(key, None)
        return data
