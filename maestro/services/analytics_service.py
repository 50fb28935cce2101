from __future__ import annotations

from typing import Optional

from maestro.domain.entities import AnalyticsSnapshotEntity
from maestro.domain.enums import AnalyticsPeriod, TaskStatus
from maestro.domain.metrics import STREAK_MAX_DAYS, AnalyticsSummary, current_streak, summarize
from maestro.infra.repository import MaestroRepository


class AnalyticsService:
    def __init__(self, repo: MaestroRepository) -> None:
        self._repo = repo

    def refresh_today(self) -> Optional[AnalyticsSnapshotEntity]:
        return self._repo.update_analytics()

    def load_summary(self, days: int | AnalyticsPeriod = AnalyticsPeriod.WEEK) -> AnalyticsSummary:
        window = self._repo.fetch_analytics(int(days))
        # The streak looks back further than a week-long window would allow.
        recent = self._repo.fetch_analytics(STREAK_MAX_DAYS)
        streak = current_streak(recent.data, self._repo.today())
        errors = [result.error for result in (window, recent) if result.error]
        return summarize(window.data, streak=streak, errors=errors)

    def status_distribution(self) -> dict[TaskStatus, tuple[int, float]]:
        counts = self._repo.get_status_counts().data
        total = max(counts["total"], 1)
        return {
            status: (counts[status.value], counts[status.value] / total)
            for status in TaskStatus
        }
