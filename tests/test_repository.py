from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy import text

from maestro.domain.enums import Priority, TaskStatus
from maestro.domain.filters import TaskFilters
from maestro.infra.db import Base
from maestro.infra.models import TaskModel
from maestro.services.project_service import ProjectService


def test_create_task_starts_pending_with_zeroed_hours(repo, clock) -> None:
    task = repo.create_task("Write report", "Quarterly numbers", Priority.HIGH, date(2026, 3, 20))

    assert task.status is TaskStatus.PENDING
    assert task.priority is Priority.HIGH
    assert task.created_at == clock.now
    assert task.completed_at is None
    assert task.estimated_hours == 0
    assert task.actual_hours == 0
    assert task.tags == ()
    assert task.project_id is None
    assert task.assigned_to_id is None
    assert repo.fetch_task(task.id).data == task


def test_create_task_links_known_ids_and_ignores_unknown_ones(repo) -> None:
    project = repo.create_project("Launch")
    member = repo.create_team_member("Ada", "ada@example.com", "Engineer")

    linked = repo.create_task("Linked", project_id=project.id, assigned_to_id=member.id)
    dangling = repo.create_task("Dangling", project_id=uuid.uuid4(), assigned_to_id=uuid.uuid4())

    assert linked.project_id == project.id
    assert linked.assigned_to_id == member.id
    assert dangling.project_id is None
    assert dangling.assigned_to_id is None
    assert repo.fetch_team_member(member.id).data.assigned_task_count == 1


def test_completion_timestamp_survives_later_status_changes(repo, clock) -> None:
    task = repo.create_task("Ship it")
    completed_at = clock.now

    done = repo.update_task_status(task.id, TaskStatus.COMPLETED)
    assert done.completed_at == completed_at

    clock.advance(hours=2)
    reopened = repo.update_task_status(task.id, TaskStatus.PENDING)
    assert reopened.status is TaskStatus.PENDING
    assert reopened.completed_at == completed_at

    clock.advance(hours=1)
    done_again = repo.update_task_status(task.id, "completed")
    assert done_again.completed_at == clock.now


def test_any_status_can_follow_any_other(repo) -> None:
    task = repo.create_task("Flexible")
    for status in (
        TaskStatus.BLOCKED,
        TaskStatus.COMPLETED,
        TaskStatus.IN_PROGRESS,
        TaskStatus.BLOCKED,
        TaskStatus.PENDING,
    ):
        assert repo.update_task_status(task.id, status).status is status


def test_status_change_on_missing_task_returns_none(repo) -> None:
    assert repo.update_task_status(uuid.uuid4(), TaskStatus.COMPLETED) is None


def test_unknown_status_value_is_rejected(repo) -> None:
    task = repo.create_task("Typo")
    with pytest.raises(ValueError):
        repo.update_task_status(task.id, "done")


def test_update_task_edits_fields(repo) -> None:
    project = repo.create_project("Garden")
    task = repo.create_task("Plant")

    updated = repo.update_task(task.id, {
        "title": "Plant tomatoes",
        "priority": Priority.URGENT,
        "estimated_hours": 3.0,
        "actual_hours": 1.5,
        "tags": ["outdoor", " spring ", ""],
        "project_id": project.id,
    })

    assert updated.title == "Plant tomatoes"
    assert updated.priority is Priority.URGENT
    assert updated.estimated_hours == 3.0
    assert updated.actual_hours == 1.5
    assert updated.tags == ("outdoor", "spring")
    assert updated.project_id == project.id

    cleared = repo.update_task(task.id, {"project_id": None})
    assert cleared.project_id is None


def test_update_task_refuses_status_edits(repo) -> None:
    task = repo.create_task("Guarded")
    with pytest.raises(ValueError):
        repo.update_task(task.id, {"status": TaskStatus.COMPLETED})


def test_list_tasks_filters_and_searches(repo, clock) -> None:
    first = repo.create_task("Buy milk", "groceries", Priority.LOW)
    clock.advance(minutes=1)
    urgent = repo.create_task("Fix outage", "prod is down", Priority.URGENT)
    clock.advance(minutes=1)
    late = repo.create_task("File taxes", "", Priority.MEDIUM, clock.now.date() - timedelta(days=1))
    repo.update_task_status(first.id, TaskStatus.COMPLETED)

    all_ids = [t.id for t in repo.fetch_all_tasks().data]
    assert all_ids == [late.id, urgent.id, first.id]

    def ids(key: str, search: str | None = None) -> list[uuid.UUID]:
        return [t.id for t in repo.list_tasks(TaskFilters(filter_key=key, search=search)).data]

    assert ids("completed") == [first.id]
    assert ids("urgent") == [urgent.id]
    assert ids("active") == [late.id, urgent.id]
    assert ids("overdue") == [late.id]
    assert ids("all", search="GROCER") == [first.id]

    with pytest.raises(ValueError):
        repo.list_tasks(TaskFilters(filter_key="someday"))


def test_status_counts(repo, clock) -> None:
    done = repo.create_task("Done")
    blocked = repo.create_task("Blocked")
    repo.create_task("Late", due_date=clock.now.date() - timedelta(days=2))
    repo.update_task_status(done.id, TaskStatus.COMPLETED)
    repo.update_task_status(blocked.id, TaskStatus.BLOCKED)

    counts = repo.get_status_counts().data

    assert counts == {
        "total": 3,
        "pending": 1,
        "in_progress": 0,
        "completed": 1,
        "blocked": 1,
        "overdue": 1,
    }


def test_project_progress_is_zero_without_tasks(repo) -> None:
    project = repo.create_project("Empty")
    assert repo.update_project_progress(project.id).progress == 0.0


def test_project_progress_is_refreshed_only_on_request(repo) -> None:
    project = repo.create_project("Website")
    tasks = [repo.create_task(f"Page {i}", project_id=project.id) for i in range(3)]
    repo.update_task_status(tasks[0].id, TaskStatus.COMPLETED)
    repo.update_task_status(tasks[1].id, TaskStatus.COMPLETED)

    assert repo.fetch_project(project.id).data.progress == 0.0

    refreshed = repo.update_project_progress(project.id)
    assert refreshed.progress == 2 / 3
    assert refreshed.task_count == 3
    assert refreshed.completed_task_count == 2


def test_deleting_a_task_leaves_progress_stale(repo) -> None:
    project = repo.create_project("Move house")
    keep = repo.create_task("Pack", project_id=project.id)
    drop = repo.create_task("Sell sofa", project_id=project.id)
    repo.update_task_status(keep.id, TaskStatus.COMPLETED)
    repo.update_project_progress(project.id)

    assert repo.delete_task(drop.id) is True
    assert repo.fetch_task(drop.id).data is None
    assert repo.fetch_project(project.id).data.progress == 0.5
    assert repo.update_project_progress(project.id).progress == 1.0


def test_update_all_project_progress(repo) -> None:
    first = repo.create_project("First")
    second = repo.create_project("Second")
    task = repo.create_task("Only", project_id=first.id)
    repo.update_task_status(task.id, TaskStatus.COMPLETED)

    progress = {p.id: p.progress for p in repo.update_all_project_progress()}

    assert progress == {first.id: 1.0, second.id: 0.0}


def test_project_end_date_cannot_precede_start(repo) -> None:
    with pytest.raises(ValueError):
        repo.create_project("Backwards", start_date=date(2026, 5, 1), end_date=date(2026, 4, 1))


def test_deleting_a_project_deletes_its_tasks(repo) -> None:
    project = repo.create_project("Doomed")
    owned = [repo.create_task(f"Owned {i}", project_id=project.id) for i in range(2)]
    loose = repo.create_task("Loose")

    assert repo.delete_project(project.id) is True

    remaining = [t.id for t in repo.fetch_all_tasks().data]
    assert remaining == [loose.id]
    assert all(repo.fetch_task(t.id).data is None for t in owned)
    assert repo.fetch_project(project.id).data is None


def test_deleting_a_member_clears_assignments(repo) -> None:
    member = repo.create_team_member("Grace", "grace@example.com", "Lead")
    task = repo.create_task("Review", assigned_to_id=member.id)

    assert repo.delete_team_member(member.id) is True

    survivor = repo.fetch_task(task.id).data
    assert survivor is not None
    assert survivor.assigned_to_id is None
    assert repo.fetch_all_team_members().data == []


def test_team_members_are_listed_by_name(repo) -> None:
    for name in ("Zoe", "Adam", "Mia"):
        repo.create_team_member(name)
    assert [m.name for m in repo.fetch_all_team_members().data] == ["Adam", "Mia", "Zoe"]


def test_delete_missing_rows_reports_false(repo) -> None:
    assert repo.delete_task(uuid.uuid4()) is False
    assert repo.delete_project(uuid.uuid4()) is False
    assert repo.delete_team_member(uuid.uuid4()) is False


def test_mark_tip_as_read_is_one_way(repo) -> None:
    repo.seed_educational_tips()
    tip = repo.fetch_all_educational_tips().data[0]

    assert repo.mark_tip_as_read(tip.id).is_read is True
    assert repo.mark_tip_as_read(tip.id).is_read is True
    assert sum(t.is_read for t in repo.fetch_all_educational_tips().data) == 1


def test_delete_all_wipes_every_collection(repo) -> None:
    repo.seed_sample_data()

    assert repo.delete_all() is True

    assert repo.fetch_all_tasks().data == []
    assert repo.fetch_all_projects().data == []
    assert repo.fetch_all_team_members().data == []
    assert repo.fetch_all_educational_tips().data == []
    assert repo.fetch_analytics(365).data == []


def test_query_failure_returns_empty_result_with_reason(repo, engine, caplog) -> None:
    Base.metadata.drop_all(engine)

    with caplog.at_level(logging.ERROR):
        result = repo.fetch_all_projects()

    assert result.data == []
    assert not result.ok
    assert result.error
    assert "Query failed while listing projects" in caplog.text


def test_commit_failure_is_logged_and_reported(repo, engine, caplog) -> None:
    Base.metadata.drop_all(engine)

    with caplog.at_level(logging.ERROR):
        project = repo.create_project("Nowhere to go")

    assert project is None
    assert "Write failed while creating project" in caplog.text


def test_project_listing_survives_broken_store(repo, engine, caplog) -> None:
    repo.create_project("Vanishing")
    Base.metadata.drop_all(engine)

    with caplog.at_level(logging.ERROR):
        projects = ProjectService(repo).list_projects()

    assert projects == []
    assert "Write failed while updating project progress" in caplog.text


def test_mutations_on_broken_store_return_empty_defaults(repo, engine, caplog) -> None:
    task = repo.create_task("Doomed")
    project = repo.create_project("Doomed too")
    Base.metadata.drop_all(engine)

    with caplog.at_level(logging.ERROR):
        assert repo.update_task_status(task.id, TaskStatus.COMPLETED) is None
        assert repo.update_task(task.id, {"title": "Renamed"}) is None
        assert repo.update_project_progress(project.id) is None
        assert repo.mark_tip_as_read(uuid.uuid4()) is None
        assert repo.update_analytics() is None
        assert repo.delete_task(task.id) is False
        assert repo.delete_project(project.id) is False
        assert repo.delete_team_member(uuid.uuid4()) is False
        assert repo.delete_all() is False
        assert repo.seed_sample_data() is False
        assert repo.seed_educational_tips() == 0
        assert repo.update_all_project_progress() == []

    assert "Write failed while updating task status" in caplog.text
    assert "Write failed while seeding educational tips" in caplog.text


def test_failed_sample_seed_leaves_nothing_behind(repo, engine) -> None:
    TaskModel.__table__.drop(engine)

    assert repo.seed_sample_data() is False
    with engine.connect() as connection:
        assert connection.scalar(text("SELECT COUNT(*) FROM projects")) == 0
        assert connection.scalar(text("SELECT COUNT(*) FROM team_members")) == 0

    Base.metadata.create_all(engine)
    assert repo.seed_sample_data() is True
    assert len(repo.fetch_all_projects().data) == 2
    assert len(repo.fetch_all_tasks().data) == 3
    assert len(repo.fetch_all_team_members().data) == 3
