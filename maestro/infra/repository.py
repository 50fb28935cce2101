from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Optional, TypeVar

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from maestro.domain.dates import add_months, day_bounds
from maestro.domain.entities import (
    AnalyticsSnapshotEntity,
    EducationalTipEntity,
    ProjectEntity,
    TaskEntity,
    TeamMemberEntity,
)
from maestro.domain.enums import Priority, TaskStatus, TipCategory
from maestro.domain.filters import FILTER_KEYS, TaskFilters
from maestro.domain.metrics import productivity_score
from maestro.domain.results import QueryResult
from maestro.domain.tips import TIP_CATALOG

from .models import (
    AnalyticsSnapshotModel,
    EducationalTipModel,
    ProjectModel,
    TaskModel,
    TeamMemberModel,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_COMPLETED = TaskStatus.COMPLETED.value

EDITABLE_TASK_FIELDS = frozenset({
    "title",
    "description",
    "priority",
    "due_date",
    "estimated_hours",
    "actual_hours",
    "tags",
    "project_id",
    "assigned_to_id",
})

EMPTY_STATUS_COUNTS = {
    "total": 0,
    **{status.value: 0 for status in TaskStatus},
    "overdue": 0,
}


def _split_tags(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(tag.strip() for tag in raw.split(",") if tag.strip())


def _join_tags(tags: Iterable[str] | str) -> str:
    if isinstance(tags, str):
        tags = tags.split(",")
    return ",".join(tag.strip() for tag in tags if tag.strip())


def _task_to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        priority=Priority(model.priority),
        status=TaskStatus(model.status),
        created_at=model.created_at,
        due_date=model.due_date,
        completed_at=model.completed_at,
        estimated_hours=model.estimated_hours,
        actual_hours=model.actual_hours,
        tags=_split_tags(model.tags),
        project_id=model.project_id,
        assigned_to_id=model.assigned_to_id,
    )


def _project_to_entity(model: ProjectModel) -> ProjectEntity:
    tasks = list(model.tasks)
    return ProjectEntity(
        id=model.id,
        name=model.name,
        description=model.description,
        start_date=model.start_date,
        end_date=model.end_date,
        color=model.color,
        progress=model.progress,
        created_at=model.created_at,
        task_count=len(tasks),
        completed_task_count=sum(1 for task in tasks if task.status == STATUS_COMPLETED),
    )


def _member_to_entity(model: TeamMemberModel) -> TeamMemberEntity:
    return TeamMemberEntity(
        id=model.id,
        name=model.name,
        email=model.email,
        role=model.role,
        avatar_color=model.avatar_color,
        created_at=model.created_at,
        assigned_task_count=len(model.assigned_tasks),
    )


def _snapshot_to_entity(model: AnalyticsSnapshotModel) -> AnalyticsSnapshotEntity:
    return AnalyticsSnapshotEntity(
        id=model.id,
        date=model.date,
        tasks_completed=model.tasks_completed,
        tasks_created=model.tasks_created,
        hours_worked=model.hours_worked,
        productivity_score=model.productivity_score,
    )


def _tip_to_entity(model: EducationalTipModel) -> EducationalTipEntity:
    return EducationalTipEntity(
        id=model.id,
        title=model.title,
        content=model.content,
        category=TipCategory(model.category),
        is_read=model.is_read,
        created_at=model.created_at,
    )


def _apply_filters(stmt, filters: TaskFilters, today: date) -> object:
    if filters.filter_key not in FILTER_KEYS:
        raise ValueError(f"Unknown task filter: {filters.filter_key!r}")

    if filters.filter_key in {s.value for s in TaskStatus}:
        stmt = stmt.where(TaskModel.status == filters.filter_key)
    elif filters.filter_key == "urgent":
        stmt = stmt.where(TaskModel.priority == Priority.URGENT.value)
    elif filters.filter_key == "active":
        stmt = stmt.where(TaskModel.status != STATUS_COMPLETED)
    elif filters.filter_key == "overdue":
        stmt = stmt.where(
            TaskModel.due_date.is_not(None),
            TaskModel.due_date < today,
            TaskModel.status != STATUS_COMPLETED,
        )

    if filters.project_id is not None:
        stmt = stmt.where(TaskModel.project_id == filters.project_id)

    if filters.assigned_to_id is not None:
        stmt = stmt.where(TaskModel.assigned_to_id == filters.assigned_to_id)

    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(
            or_(
                TaskModel.title.ilike(pattern),
                TaskModel.description.ilike(pattern),
                TaskModel.tags.ilike(pattern),
            )
        )

    return stmt


class MaestroRepository:
    """Single writer for every entity in the store.

    Each call opens its own short-lived session and commits before it
    returns. Reads hand back detached dataclasses wrapped in
    :class:`QueryResult`; a failing query is logged and yields the empty
    default instead of raising. Writes go through :meth:`_mutate`: any
    store error, whether in the lookup before the write or in the commit
    itself, is logged, the session is rolled back and the caller gets
    ``None``, ``False``, ``0`` or ``[]`` depending on the operation.

    ``clock`` supplies local wall-clock time and decides what "today" means
    for analytics.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def today(self) -> date:
        return self._clock().date()

    # Tasks

    def list_tasks(self, filters: TaskFilters) -> QueryResult[list[TaskEntity]]:
        today = self.today()

        def run(session: Session) -> list[TaskEntity]:
            stmt = _apply_filters(select(TaskModel), filters, today)
            stmt = stmt.order_by(TaskModel.created_at.desc(), TaskModel.title.asc())
            return [_task_to_entity(task) for task in session.scalars(stmt)]

        return self._query("listing tasks", run, [])

    def fetch_all_tasks(self) -> QueryResult[list[TaskEntity]]:
        return self.list_tasks(TaskFilters())

    def fetch_task(self, task_id: uuid.UUID) -> QueryResult[Optional[TaskEntity]]:
        def run(session: Session) -> Optional[TaskEntity]:
            task = session.get(TaskModel, task_id)
            return _task_to_entity(task) if task else None

        return self._query("fetching task", run, None)

    def create_task(
        self,
        title: str,
        description: str = "",
        priority: Priority | int = Priority.MEDIUM,
        due_date: Optional[date] = None,
        project_id: Optional[uuid.UUID] = None,
        assigned_to_id: Optional[uuid.UUID] = None,
    ) -> Optional[TaskEntity]:
        priority = Priority(priority)

        def run(session: Session) -> TaskEntity:
            task = self._new_task(title, description, priority, due_date)
            if project_id is not None:
                task.project = self._resolve(session, ProjectModel, project_id)
            if assigned_to_id is not None:
                task.assigned_to = self._resolve(session, TeamMemberModel, assigned_to_id)
            session.add(task)
            session.commit()
            session.refresh(task)
            return _task_to_entity(task)

        entity = self._mutate("creating task", run, None)
        if entity is not None:
            self.update_analytics()
        return entity

    def update_task(self, task_id: uuid.UUID, data: dict[str, Any]) -> Optional[TaskEntity]:
        unknown = set(data) - EDITABLE_TASK_FIELDS
        if unknown:
            raise ValueError(f"Task fields cannot be edited here: {', '.join(sorted(unknown))}")

        def run(session: Session) -> Optional[TaskEntity]:
            task = session.get(TaskModel, task_id)
            if not task:
                logger.warning("Cannot update missing task %s", task_id)
                return None

            for key, value in data.items():
                if key == "priority":
                    task.priority = Priority(value).value
                elif key == "tags":
                    task.tags = _join_tags(value or ())
                elif key == "project_id":
                    if value is None:
                        task.project = None
                    else:
                        project = self._resolve(session, ProjectModel, value)
                        if project is not None:
                            task.project = project
                elif key == "assigned_to_id":
                    if value is None:
                        task.assigned_to = None
                    else:
                        member = self._resolve(session, TeamMemberModel, value)
                        if member is not None:
                            task.assigned_to = member
                else:
                    setattr(task, key, value)

            session.commit()
            session.refresh(task)
            return _task_to_entity(task)

        entity = self._mutate("updating task", run, None)
        if entity is not None:
            self.update_analytics()
        return entity

    def update_task_status(
        self, task_id: uuid.UUID, status: TaskStatus | str
    ) -> Optional[TaskEntity]:
        new_status = TaskStatus(status)

        def run(session: Session) -> Optional[TaskEntity]:
            task = session.get(TaskModel, task_id)
            if not task:
                logger.warning("Cannot change status of missing task %s", task_id)
                return None

            task.status = new_status.value
            # completed_at is only ever set here, never cleared on a later change.
            if new_status is TaskStatus.COMPLETED:
                task.completed_at = self._clock()

            session.commit()
            session.refresh(task)
            return _task_to_entity(task)

        entity = self._mutate("updating task status", run, None)
        if entity is not None:
            self.update_analytics()
        return entity

    def delete_task(self, task_id: uuid.UUID) -> bool:
        def run(session: Session) -> bool:
            task = session.get(TaskModel, task_id)
            if not task:
                return False
            session.delete(task)
            session.commit()
            return True

        return self._mutate("deleting task", run, False)

    def get_status_counts(self) -> QueryResult[dict[str, int]]:
        today = self.today()

        def run(session: Session) -> dict[str, int]:
            counts = dict(EMPTY_STATUS_COUNTS)
            rows = session.execute(
                select(TaskModel.status, func.count()).group_by(TaskModel.status)
            ).all()
            for status, count in rows:
                counts[status] = count
                counts["total"] += count
            counts["overdue"] = session.scalar(
                select(func.count())
                .select_from(TaskModel)
                .where(
                    TaskModel.due_date.is_not(None),
                    TaskModel.due_date < today,
                    TaskModel.status != STATUS_COMPLETED,
                )
            ) or 0
            return counts

        return self._query("counting tasks", run, dict(EMPTY_STATUS_COUNTS))

    # Projects

    def create_project(
        self,
        name: str,
        description: str = "",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        color: str = "#4CAF50",
    ) -> Optional[ProjectEntity]:
        start_date = start_date or self.today()
        if end_date is not None and end_date < start_date:
            raise ValueError("Project end date cannot be before its start date")

        def run(session: Session) -> ProjectEntity:
            project = self._new_project(name, description, start_date, end_date, color)
            session.add(project)
            session.commit()
            session.refresh(project)
            return _project_to_entity(project)

        return self._mutate("creating project", run, None)

    def fetch_all_projects(self) -> QueryResult[list[ProjectEntity]]:
        def run(session: Session) -> list[ProjectEntity]:
            stmt = select(ProjectModel).order_by(
                ProjectModel.created_at.desc(), ProjectModel.name.asc()
            )
            return [_project_to_entity(project) for project in session.scalars(stmt)]

        return self._query("listing projects", run, [])

    def fetch_project(self, project_id: uuid.UUID) -> QueryResult[Optional[ProjectEntity]]:
        def run(session: Session) -> Optional[ProjectEntity]:
            project = session.get(ProjectModel, project_id)
            return _project_to_entity(project) if project else None

        return self._query("fetching project", run, None)

    def update_project_progress(self, project_id: uuid.UUID) -> Optional[ProjectEntity]:
        def run(session: Session) -> Optional[ProjectEntity]:
            project = session.get(ProjectModel, project_id)
            if not project:
                logger.warning("Cannot refresh progress of missing project %s", project_id)
                return None
            self._recompute_progress(project)
            session.commit()
            session.refresh(project)
            return _project_to_entity(project)

        return self._mutate("updating project progress", run, None)

    def update_all_project_progress(self) -> list[ProjectEntity]:
        def run(session: Session) -> list[ProjectEntity]:
            projects = list(session.scalars(select(ProjectModel)))
            for project in projects:
                self._recompute_progress(project)
            session.commit()
            return [_project_to_entity(project) for project in projects]

        return self._mutate("updating project progress", run, [])

    def delete_project(self, project_id: uuid.UUID) -> bool:
        def run(session: Session) -> bool:
            project = session.get(ProjectModel, project_id)
            if not project:
                return False
            session.delete(project)
            session.commit()
            return True

        return self._mutate("deleting project", run, False)

    # Team members

    def create_team_member(
        self,
        name: str,
        email: str = "",
        role: str = "",
        avatar_color: str = "#4ECDC4",
    ) -> Optional[TeamMemberEntity]:
        def run(session: Session) -> TeamMemberEntity:
            member = self._new_member(name, email, role, avatar_color)
            session.add(member)
            session.commit()
            session.refresh(member)
            return _member_to_entity(member)

        return self._mutate("creating team member", run, None)

    def fetch_all_team_members(self) -> QueryResult[list[TeamMemberEntity]]:
        def run(session: Session) -> list[TeamMemberEntity]:
            stmt = select(TeamMemberModel).order_by(TeamMemberModel.name.asc())
            return [_member_to_entity(member) for member in session.scalars(stmt)]

        return self._query("listing team members", run, [])

    def fetch_team_member(self, member_id: uuid.UUID) -> QueryResult[Optional[TeamMemberEntity]]:
        def run(session: Session) -> Optional[TeamMemberEntity]:
            member = session.get(TeamMemberModel, member_id)
            return _member_to_entity(member) if member else None

        return self._query("fetching team member", run, None)

    def delete_team_member(self, member_id: uuid.UUID) -> bool:
        def run(session: Session) -> bool:
            member = session.get(TeamMemberModel, member_id)
            if not member:
                return False
            for task in list(member.assigned_tasks):
                task.assigned_to = None
            session.delete(member)
            session.commit()
            return True

        return self._mutate("deleting team member", run, False)

    # Analytics

    def update_analytics(self) -> Optional[AnalyticsSnapshotEntity]:
        today = self.today()
        start, end = day_bounds(today)

        def run(session: Session) -> AnalyticsSnapshotEntity:
            snapshot = session.scalar(
                select(AnalyticsSnapshotModel).where(AnalyticsSnapshotModel.date == today)
            )
            if snapshot is None:
                snapshot = AnalyticsSnapshotModel(id=uuid.uuid4(), date=today)
                session.add(snapshot)

            completed_today = (
                TaskModel.completed_at.is_not(None),
                TaskModel.completed_at >= start,
                TaskModel.completed_at < end,
            )
            created = session.scalar(
                select(func.count())
                .select_from(TaskModel)
                .where(TaskModel.created_at >= start, TaskModel.created_at < end)
            ) or 0
            completed = session.scalar(
                select(func.count()).select_from(TaskModel).where(*completed_today)
            ) or 0
            hours = session.scalar(
                select(func.coalesce(func.sum(TaskModel.actual_hours), 0.0)).where(*completed_today)
            ) or 0.0

            snapshot.tasks_created = created
            snapshot.tasks_completed = completed
            snapshot.hours_worked = float(hours)
            snapshot.productivity_score = productivity_score(completed, created)

            session.commit()
            session.refresh(snapshot)
            return _snapshot_to_entity(snapshot)

        return self._mutate("updating analytics", run, None)

    def fetch_analytics(self, days: int = 7) -> QueryResult[list[AnalyticsSnapshotEntity]]:
        end_date = self.today()
        start_date = end_date - timedelta(days=days)

        def run(session: Session) -> list[AnalyticsSnapshotEntity]:
            stmt = (
                select(AnalyticsSnapshotModel)
                .where(AnalyticsSnapshotModel.date.between(start_date, end_date))
                .order_by(AnalyticsSnapshotModel.date.asc())
            )
            return [_snapshot_to_entity(row) for row in session.scalars(stmt)]

        return self._query("fetching analytics", run, [])

    # Educational tips

    def seed_educational_tips(self) -> int:
        def run(session: Session) -> int:
            added = self._add_tip_catalog(session)
            session.commit()
            return added

        added = self._mutate("seeding educational tips", run, 0)
        if added:
            logger.info("Seeded %d educational tips", added)
        return added

    def fetch_all_educational_tips(
        self, category: TipCategory | str | None = None
    ) -> QueryResult[list[EducationalTipEntity]]:
        def run(session: Session) -> list[EducationalTipEntity]:
            stmt = select(EducationalTipModel)
            if category is not None:
                stmt = stmt.where(EducationalTipModel.category == TipCategory(category).value)
            stmt = stmt.order_by(EducationalTipModel.created_at.desc(), EducationalTipModel.title.asc())
            return [_tip_to_entity(tip) for tip in session.scalars(stmt)]

        return self._query("listing educational tips", run, [])

    def mark_tip_as_read(self, tip_id: uuid.UUID) -> Optional[EducationalTipEntity]:
        def run(session: Session) -> Optional[EducationalTipEntity]:
            tip = session.get(EducationalTipModel, tip_id)
            if not tip:
                logger.warning("Cannot mark missing tip %s as read", tip_id)
                return None
            if not tip.is_read:
                tip.is_read = True
                session.commit()
                session.refresh(tip)
            return _tip_to_entity(tip)

        return self._mutate("marking tip as read", run, None)

    # Seeding and reset

    def seed_sample_data(self) -> bool:
        """Insert the demo projects, team, tasks and tips in one commit.

        The "any project exists" guard makes repeat calls no-ops, so the
        whole set is written atomically: a failed attempt leaves no projects
        behind and the next call seeds from scratch.
        """
        today = self.today()

        def run(session: Session) -> bool:
            if session.scalar(select(func.count()).select_from(ProjectModel)):
                return False

            mobile = self._new_project(
                "Mobile App Development",
                "Build a new iOS application",
                today,
                add_months(today, 3),
                "#4CAF50",
            )
            marketing = self._new_project(
                "Marketing Campaign",
                "Q1 marketing initiatives",
                today,
                add_months(today, 2),
                "#2196F3",
            )
            lead = self._new_member(
                "Sarah Johnson", "sarah@taskmaestro.com", "Project Manager", "#FF6B6B"
            )
            members = [
                lead,
                self._new_member("Mike Chen", "mike@taskmaestro.com", "Developer", "#4ECDC4"),
                self._new_member("Emily Davis", "emily@taskmaestro.com", "Designer", "#95E1D3"),
            ]
            session.add_all([mobile, marketing, *members])

            design = self._new_task(
                "Design UI Mockups",
                "Create initial design concepts",
                Priority.HIGH,
                today + timedelta(days=7),
            )
            design.assigned_to = lead
            tasks = [
                design,
                self._new_task(
                    "Setup Development Environment",
                    "Configure Xcode and dependencies",
                    Priority.URGENT,
                    today + timedelta(days=3),
                ),
                self._new_task(
                    "Write Technical Specifications",
                    "Document technical requirements",
                    Priority.MEDIUM,
                    today + timedelta(days=5),
                ),
            ]
            for task in tasks:
                task.project = mobile
            session.add_all(tasks)

            self._add_tip_catalog(session)
            session.commit()
            return True

        seeded = self._mutate("seeding sample data", run, False)
        if seeded:
            self.update_analytics()
            logger.info("Seeded sample projects, team members, tasks and tips")
        return seeded

    def delete_all(self) -> bool:
        def run(session: Session) -> bool:
            # Tasks first so no foreign key points at a removed row.
            for model in (
                TaskModel,
                ProjectModel,
                TeamMemberModel,
                AnalyticsSnapshotModel,
                EducationalTipModel,
            ):
                session.execute(delete(model))
            session.commit()
            return True

        deleted = self._mutate("deleting all data", run, False)
        if deleted:
            logger.info("All stored data deleted")
        return deleted

    # Helpers

    def _query(self, action: str, run: Callable[[Session], T], default: T) -> QueryResult[T]:
        try:
            with self._session_factory() as session:
                return QueryResult.success(run(session))
        except SQLAlchemyError as exc:
            logger.exception("Query failed while %s", action)
            return QueryResult.failure(default, str(exc))

    def _mutate(self, action: str, run: Callable[[Session], T], default: T) -> T:
        # Closing the session rolls back whatever the failed call left open.
        try:
            with self._session_factory() as session:
                return run(session)
        except SQLAlchemyError:
            logger.exception("Write failed while %s", action)
            return default

    def _new_task(
        self, title: str, description: str, priority: Priority, due_date: Optional[date]
    ) -> TaskModel:
        return TaskModel(
            id=uuid.uuid4(),
            title=title,
            description=description,
            priority=priority.value,
            status=TaskStatus.PENDING.value,
            created_at=self._clock(),
            due_date=due_date,
            completed_at=None,
            estimated_hours=0.0,
            actual_hours=0.0,
            tags="",
        )

    def _new_project(
        self,
        name: str,
        description: str,
        start_date: date,
        end_date: Optional[date],
        color: str,
    ) -> ProjectModel:
        return ProjectModel(
            id=uuid.uuid4(),
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            color=color,
            progress=0.0,
            created_at=self._clock(),
        )

    def _new_member(self, name: str, email: str, role: str, avatar_color: str) -> TeamMemberModel:
        return TeamMemberModel(
            id=uuid.uuid4(),
            name=name,
            email=email,
            role=role,
            avatar_color=avatar_color,
            created_at=self._clock(),
        )

    def _add_tip_catalog(self, session: Session) -> int:
        if session.scalar(select(func.count()).select_from(EducationalTipModel)):
            return 0
        now = self._clock()
        for title, content, category in TIP_CATALOG:
            session.add(
                EducationalTipModel(
                    id=uuid.uuid4(),
                    title=title,
                    content=content,
                    category=category.value,
                    is_read=False,
                    created_at=now,
                )
            )
        return len(TIP_CATALOG)

    @staticmethod
    def _resolve(session: Session, model: type, entity_id: uuid.UUID):
        instance = session.get(model, entity_id)
        if instance is None:
            logger.warning("No %s with id %s; link left empty", model.__tablename__, entity_id)
        return instance

    @staticmethod
    def _recompute_progress(project: ProjectModel) -> None:
        tasks = list(project.tasks)
        if not tasks:
            project.progress = 0.0
        else:
            completed = sum(1 for task in tasks if task.status == STATUS_COMPLETED)
            project.progress = completed / len(tasks)
