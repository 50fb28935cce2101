from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from maestro.config import SETTINGS, Settings
from maestro.infra.db import create_db_engine, init_db, make_session_factory
from maestro.infra.logging import setup_logging
from maestro.infra.preferences import Preferences
from maestro.infra.repository import MaestroRepository
from maestro.services.analytics_service import AnalyticsService
from maestro.services.project_service import ProjectService
from maestro.services.task_service import TaskService
from maestro.services.team_service import TeamService
from maestro.services.tip_service import TipService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    repository: MaestroRepository
    tasks: TaskService
    projects: ProjectService
    team: TeamService
    analytics: AnalyticsService
    tips: TipService
    preferences: Preferences

    def reset_all(self) -> bool:
        """Wipe every stored entity and forget onboarding."""
        deleted = self.repository.delete_all()
        self.preferences.reset()
        return deleted


def build_container(settings: Settings = SETTINGS) -> AppContainer:
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    repository = MaestroRepository(make_session_factory(engine))
    return AppContainer(
        repository=repository,
        tasks=TaskService(repository),
        projects=ProjectService(repository),
        team=TeamService(repository),
        analytics=AnalyticsService(repository),
        tips=TipService(repository),
        preferences=Preferences(settings.resolve_path(settings.preferences_path)),
    )


def main() -> None:
    setup_logging()
    try:
        container = build_container()
    except (OSError, SQLAlchemyError) as exc:
        logger.critical("Entity store failed to load: %s", exc)
        raise SystemExit(1) from exc

    if SETTINGS.seed_sample_data:
        container.repository.seed_sample_data()

    stats = container.tasks.get_stats()
    summary = container.analytics.load_summary()
    logger.info(
        "Task Maestro ready: %d tasks (%d completed), %d projects, streak %d day(s), onboarding %s",
        stats["total"],
        stats["completed"],
        len(container.projects.list_projects()),
        summary.current_streak,
        "done" if container.preferences.has_completed_onboarding else "pending",
    )


if __name__ == "__main__":
    main()
