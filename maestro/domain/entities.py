from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .enums import Priority, TaskStatus, TipCategory


@dataclass(frozen=True)
class TaskEntity:
    id: uuid.UUID
    title: str
    description: str
    priority: Priority
    status: TaskStatus
    created_at: datetime
    due_date: Optional[date]
    completed_at: Optional[datetime]
    estimated_hours: float
    actual_hours: float
    tags: tuple[str, ...]
    project_id: Optional[uuid.UUID]
    assigned_to_id: Optional[uuid.UUID]


@dataclass(frozen=True)
class ProjectEntity:
    id: uuid.UUID
    name: str
    description: str
    start_date: date
    end_date: Optional[date]
    color: str
    progress: float
    created_at: datetime
    task_count: int
    completed_task_count: int


@dataclass(frozen=True)
class TeamMemberEntity:
    id: uuid.UUID
    name: str
    email: str
    role: str
    avatar_color: str
    created_at: datetime
    assigned_task_count: int


@dataclass(frozen=True)
class AnalyticsSnapshotEntity:
    id: uuid.UUID
    date: date
    tasks_completed: int
    tasks_created: int
    hours_worked: float
    productivity_score: float


@dataclass(frozen=True)
class EducationalTipEntity:
    id: uuid.UUID
    title: str
    content: str
    category: TipCategory
    is_read: bool
    created_at: datetime
