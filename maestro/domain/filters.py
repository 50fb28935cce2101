from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

FILTER_KEYS = (
    "all",
    "pending",
    "in_progress",
    "completed",
    "blocked",
    "urgent",
    "active",
    "overdue",
)


@dataclass(frozen=True)
class TaskFilters:
    filter_key: str = "all"
    search: str | None = None
    project_id: Optional[uuid.UUID] = None
    assigned_to_id: Optional[uuid.UUID] = None
