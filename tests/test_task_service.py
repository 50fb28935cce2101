from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime

import pytest

from maestro.domain.entities import TaskEntity
from maestro.domain.enums import Priority, TaskStatus
from maestro.domain.filters import TaskFilters
from maestro.domain.results import QueryResult
from maestro.services.task_service import TaskService


class FakeRepo:
    def __init__(self) -> None:
        self.tasks: list[TaskEntity] = []
        self.updates: list[tuple[uuid.UUID, dict]] = []
        self.filters_seen: list[TaskFilters] = []

    def list_tasks(self, filters: TaskFilters) -> QueryResult[list[TaskEntity]]:
        self.filters_seen.append(filters)
        tasks = self.tasks
        if filters.filter_key == "active":
            tasks = [t for t in tasks if t.status is not TaskStatus.COMPLETED]
        return QueryResult.success(list(reversed(tasks)))

    def fetch_task(self, task_id: uuid.UUID) -> QueryResult[TaskEntity | None]:
        return QueryResult.success(next((t for t in self.tasks if t.id == task_id), None))

    def create_task(self, title, description="", priority=Priority.MEDIUM, due_date=None,
                    project_id=None, assigned_to_id=None) -> TaskEntity:
        task = TaskEntity(
            id=uuid.uuid4(),
            title=title,
            description=description,
            priority=Priority(priority),
            status=TaskStatus.PENDING,
            created_at=datetime(2026, 3, 10, 9, 0),
            due_date=due_date,
            completed_at=None,
            estimated_hours=0.0,
            actual_hours=0.0,
            tags=(),
            project_id=project_id,
            assigned_to_id=assigned_to_id,
        )
        self.tasks.append(task)
        return task

    def update_task(self, task_id: uuid.UUID, data: dict) -> TaskEntity | None:
        self.updates.append((task_id, data))
        return self.fetch_task(task_id).data

    def update_task_status(self, task_id: uuid.UUID, status: TaskStatus) -> TaskEntity | None:
        task = self.fetch_task(task_id).data
        if not task:
            return None
        completed_at = datetime(2026, 3, 10, 17, 0) if status is TaskStatus.COMPLETED else task.completed_at
        updated = replace(task, status=status, completed_at=completed_at)
        self.tasks = [updated if t.id == task_id else t for t in self.tasks]
        return updated

    def delete_task(self, task_id: uuid.UUID) -> bool:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return len(self.tasks) != before

    def get_status_counts(self) -> QueryResult[dict[str, int]]:
        counts = {status.value: 0 for status in TaskStatus}
        for task in self.tasks:
            counts[task.status.value] += 1
        return QueryResult.success({"total": len(self.tasks), **counts, "overdue": 0})


def test_mark_done_then_reopen_keeps_completion_time() -> None:
    repo = FakeRepo()
    service = TaskService(repo)
    task = service.create_task("  Review PR  ", priority=Priority.HIGH)

    done = service.mark_done(task.id)
    reopened = service.reopen_task(task.id)

    assert task.title == "Review PR"
    assert done.status is TaskStatus.COMPLETED
    assert reopened.status is TaskStatus.PENDING
    assert reopened.completed_at == done.completed_at


def test_status_shortcuts() -> None:
    repo = FakeRepo()
    service = TaskService(repo)
    task = service.create_task("Deploy")

    assert service.start_task(task.id).status is TaskStatus.IN_PROGRESS
    assert service.block_task(task.id).status is TaskStatus.BLOCKED
    assert service.set_status(task.id, "completed").status is TaskStatus.COMPLETED


def test_active_tasks_are_newest_first_and_limited() -> None:
    repo = FakeRepo()
    service = TaskService(repo)
    created = [service.create_task(f"Task {i}") for i in range(8)]
    service.mark_done(created[-1].id)

    active = service.active_tasks()

    assert [t.title for t in active] == ["Task 6", "Task 5", "Task 4", "Task 3", "Task 2"]
    assert repo.filters_seen[-1].filter_key == "active"


def test_update_task_normalizes_input() -> None:
    repo = FakeRepo()
    service = TaskService(repo)
    task = service.create_task("Plan sprint")

    service.update_task(task.id, {"title": " Plan sprint 12 ", "tags": "team, planning,,", "actual_hours": "2"})

    assert repo.updates == [
        (task.id, {"title": "Plan sprint 12", "tags": ["team", "planning"], "actual_hours": 2.0}),
    ]


def test_invalid_input_is_rejected_before_reaching_the_store() -> None:
    repo = FakeRepo()
    service = TaskService(repo)
    task = service.create_task("Valid")

    with pytest.raises(ValueError):
        service.create_task("   ")
    with pytest.raises(ValueError):
        service.update_task(task.id, {"estimated_hours": -1})
    assert repo.updates == []


def test_stats_and_delete() -> None:
    repo = FakeRepo()
    service = TaskService(repo)
    first = service.create_task("One")
    service.create_task("Two")
    service.mark_done(first.id)

    assert service.get_stats()["completed"] == 1
    assert service.delete_task(first.id) is True
    assert service.get_task(first.id) is None
    assert service.get_stats()["total"] == 1
