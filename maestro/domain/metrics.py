"""Derived analytics computed from stored snapshots.

Everything here is pure: callers pass in snapshots and the current day, so
the same rules serve the repository (when it upserts today's snapshot) and
the analytics service (when it summarises a window).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from .entities import AnalyticsSnapshotEntity

MAX_SCORE = 100.0
STREAK_MAX_DAYS = 30


def productivity_score(completed: int, created: int) -> float:
    # A day with nothing created scores full marks regardless of completions.
    if created == 0:
        return MAX_SCORE
    return min(MAX_SCORE, MAX_SCORE * completed / created)


def current_streak(
    snapshots: Iterable[AnalyticsSnapshotEntity],
    today: date,
    max_days: int = STREAK_MAX_DAYS,
) -> int:
    """Count consecutive days, ending today, that have completions.

    The scan walks backwards one day at a time and stops at the first day
    that either has no snapshot or has ``tasks_completed == 0``.
    """
    by_day = {snapshot.date: snapshot for snapshot in snapshots}
    streak = 0
    for offset in range(max_days):
        snapshot = by_day.get(today - timedelta(days=offset))
        if snapshot is None or snapshot.tasks_completed <= 0:
            break
        streak += 1
    return streak


@dataclass(frozen=True)
class AnalyticsSummary:
    snapshots: tuple[AnalyticsSnapshotEntity, ...] = ()
    total_tasks_completed: int = 0
    total_hours_worked: float = 0.0
    average_productivity: float = 0.0
    current_streak: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors


def summarize(
    snapshots: Sequence[AnalyticsSnapshotEntity],
    streak: int = 0,
    errors: Sequence[str] = (),
) -> AnalyticsSummary:
    total_completed = sum(s.tasks_completed for s in snapshots)
    total_hours = sum(s.hours_worked for s in snapshots)
    average = (
        sum(s.productivity_score for s in snapshots) / len(snapshots)
        if snapshots
        else 0.0
    )
    return AnalyticsSummary(
        snapshots=tuple(snapshots),
        total_tasks_completed=total_completed,
        total_hours_worked=total_hours,
        average_productivity=average,
        current_streak=streak,
        errors=tuple(errors),
    )
