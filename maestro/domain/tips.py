from __future__ import annotations

from .enums import TipCategory

TIP_CATALOG: tuple[tuple[str, str, TipCategory], ...] = (
    (
        "Pomodoro Technique",
        "Work in 25-minute focused intervals with 5-minute breaks. This helps "
        "maintain concentration and prevents burnout.",
        TipCategory.TIME_MANAGEMENT,
    ),
    (
        "Eisenhower Matrix",
        "Prioritize tasks by urgency and importance. Focus on important but not "
        "urgent tasks to prevent last-minute rushes.",
        TipCategory.PLANNING,
    ),
    (
        "Two-Minute Rule",
        "If a task takes less than two minutes, do it immediately. This prevents "
        "small tasks from piling up.",
        TipCategory.PRODUCTIVITY,
    ),
    (
        "Time Blocking",
        "Schedule specific time blocks for different types of work. This creates "
        "structure and reduces decision fatigue.",
        TipCategory.TIME_MANAGEMENT,
    ),
    (
        "Morning Routine",
        "Start your day with a consistent routine. This sets a positive tone and "
        "improves overall productivity.",
        TipCategory.FOCUS,
    ),
    (
        "Single-Tasking",
        "Focus on one task at a time. Multitasking reduces efficiency and "
        "increases errors.",
        TipCategory.FOCUS,
    ),
    (
        "Team Standup",
        "Brief daily team meetings keep everyone aligned and identify blockers early.",
        TipCategory.TEAMWORK,
    ),
    (
        "Clear Communication",
        "Be explicit in your communication. Ambiguity leads to misunderstandings "
        "and wasted time.",
        TipCategory.TEAMWORK,
    ),
    (
        "Regular Breaks",
        "Take regular breaks to maintain mental clarity. Your brain needs rest to "
        "perform optimally.",
        TipCategory.PRODUCTIVITY,
    ),
    (
        "Goal Setting",
        "Set SMART goals (Specific, Measurable, Achievable, Relevant, Time-bound) "
        "for better results.",
        TipCategory.PLANNING,
    ),
)
