from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from maestro.domain.entities import TaskEntity
from maestro.domain.enums import Priority, TaskStatus
from maestro.domain.filters import TaskFilters
from maestro.domain.results import QueryResult
from maestro.infra.repository import MaestroRepository


class TaskService:
    def __init__(self, repo: MaestroRepository) -> None:
        self._repo = repo

    def list_tasks(self, filters: TaskFilters | None = None) -> QueryResult[list[TaskEntity]]:
        return self._repo.list_tasks(filters or TaskFilters())

    def get_task(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        return self._repo.fetch_task(task_id).data

    def create_task(
        self,
        title: str,
        description: str = "",
        priority: Priority | int = Priority.MEDIUM,
        due_date: Optional[date] = None,
        project_id: Optional[uuid.UUID] = None,
        assigned_to_id: Optional[uuid.UUID] = None,
    ) -> Optional[TaskEntity]:
        title = title.strip()
        if not title:
            raise ValueError("Task title cannot be empty")
        return self._repo.create_task(
            title,
            description.strip(),
            priority,
            due_date,
            project_id=project_id,
            assigned_to_id=assigned_to_id,
        )

    def update_task(self, task_id: uuid.UUID, data: dict) -> Optional[TaskEntity]:
        return self._repo.update_task(task_id, self._normalize_data(data))

    def delete_task(self, task_id: uuid.UUID) -> bool:
        return self._repo.delete_task(task_id)

    def set_status(self, task_id: uuid.UUID, status: TaskStatus | str) -> Optional[TaskEntity]:
        return self._repo.update_task_status(task_id, TaskStatus(status))

    def mark_done(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        return self.set_status(task_id, TaskStatus.COMPLETED)

    def start_task(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        return self.set_status(task_id, TaskStatus.IN_PROGRESS)

    def block_task(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        return self.set_status(task_id, TaskStatus.BLOCKED)

    def reopen_task(self, task_id: uuid.UUID) -> Optional[TaskEntity]:
        return self.set_status(task_id, TaskStatus.PENDING)

    def active_tasks(self, limit: int = 5) -> list[TaskEntity]:
        return self._repo.list_tasks(TaskFilters(filter_key="active")).data[:limit]

    def get_stats(self) -> dict[str, int]:
        return self._repo.get_status_counts().data

    def _normalize_data(self, data: dict) -> dict:
        normalized = dict(data)
        if "title" in normalized:
            normalized["title"] = normalized["title"].strip()
            if not normalized["title"]:
                raise ValueError("Task title cannot be empty")
        if "tags" in normalized and isinstance(normalized["tags"], str):
            normalized["tags"] = [tag.strip() for tag in normalized["tags"].split(",") if tag.strip()]
        for key in ("estimated_hours", "actual_hours"):
            if key in normalized:
                hours = float(normalized[key] or 0)
                if hours < 0:
                    raise ValueError(f"{key} cannot be negative")
                normalized[key] = hours
        return normalized
