from __future__ import annotations

from enum import IntEnum, StrEnum


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    URGENT = 3


class TipCategory(StrEnum):
    TIME_MANAGEMENT = "Time Management"
    PRODUCTIVITY = "Productivity"
    TEAMWORK = "Teamwork"
    PLANNING = "Planning"
    FOCUS = "Focus"


class AnalyticsPeriod(IntEnum):
    WEEK = 7
    MONTH = 30
    ALL_TIME = 365
