"""
Technician dashboard: personal stats, next steps, unlock notifications and recent scores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from api.services.progression import ModuleState, unlock_notifications, upcoming_modules
from api.services.records import CompetencyEntry
from api.utils.common import mean_or_none, percent, round_half_up

RECENT_SCORES = 5


@dataclass(frozen=True)
class DashboardStats:
    completed_modules: int
    total_modules: int
    in_progress: int
    completion_percentage: int
    avg_score: int


@dataclass(frozen=True)
class Dashboard:
    stats: DashboardStats
    next_steps: list[ModuleState] = field(default_factory=list)
    notifications: list[str] = field(default_factory=list)
    recent_scores: list[CompetencyEntry] = field(default_factory=list)


def build_dashboard(states: Sequence[ModuleState], competencies: Sequence[CompetencyEntry]) -> Dashboard:
    completed = sum(1 for s in states if s.completed)
    avg = mean_or_none(c.score for c in competencies)
    stats = DashboardStats(
        completed_modules=completed,
        total_modules=len(states),
        in_progress=sum(1 for s in states if s.in_progress),
        completion_percentage=percent(completed, len(states)),
        avg_score=round_half_up(avg) if avg is not None else 0,
    )
    recent = sorted(competencies, key=lambda c: c.assessed_at, reverse=True)[:RECENT_SCORES]
    return Dashboard(
        stats=stats,
        next_steps=upcoming_modules(list(states)),
        notifications=unlock_notifications(list(states)),
        recent_scores=recent,
    )
