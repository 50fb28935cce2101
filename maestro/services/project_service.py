from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from maestro.domain.entities import ProjectEntity, TaskEntity
from maestro.domain.filters import TaskFilters
from maestro.infra.repository import MaestroRepository


class ProjectService:
    """Project operations for the presentation layer.

    Progress is pull-based: nothing recomputes it when a task changes, so
    ``list_projects`` refreshes every project before listing, and callers
    that touched a single project's tasks call ``refresh_progress``.
    """

    def __init__(self, repo: MaestroRepository) -> None:
        self._repo = repo

    def list_projects(self) -> list[ProjectEntity]:
        self._repo.update_all_project_progress()
        return self._repo.fetch_all_projects().data

    def get_project(self, project_id: uuid.UUID) -> Optional[ProjectEntity]:
        return self._repo.fetch_project(project_id).data

    def create_project(
        self,
        name: str,
        description: str = "",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        color: str = "#4CAF50",
    ) -> Optional[ProjectEntity]:
        name = name.strip()
        if not name:
            raise ValueError("Project name cannot be empty")
        return self._repo.create_project(name, description.strip(), start_date, end_date, color)

    def delete_project(self, project_id: uuid.UUID) -> bool:
        return self._repo.delete_project(project_id)

    def refresh_progress(self, project_id: uuid.UUID) -> Optional[ProjectEntity]:
        return self._repo.update_project_progress(project_id)

    def tasks_for_project(self, project_id: uuid.UUID) -> list[TaskEntity]:
        return self._repo.list_tasks(TaskFilters(project_id=project_id)).data
