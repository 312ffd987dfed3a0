"""
Team statistics: per-technician and per-module aggregates, skill gaps, leaderboard,
score distribution and the daily score trend.

Everything is recomputed from a TeamSnapshot (raw progress rows + competency
records). Rows that reference users outside the roster or modules that no longer
exist are left out rather than raising.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from api.services.records import CompetencyEntry, ModuleRecord, TeamSnapshot
from api.services.progression import order_modules
from api.utils.common import mean_or_none, percent, round_half_up

GAP_THRESHOLD = 60

BUCKET_EXCELLENT = "excellent"
BUCKET_GOOD = "good"
BUCKET_NEEDS_IMPROVEMENT = "needs_improvement"
BUCKET_CRITICAL = "critical"
BUCKETS = (BUCKET_EXCELLENT, BUCKET_GOOD, BUCKET_NEEDS_IMPROVEMENT, BUCKET_CRITICAL)

SORT_NAME = "name"
SORT_COMPLETION = "completion"
SORT_SCORE = "score"


@dataclass(frozen=True)
class TechnicianStats:
    id: int
    full_name: str
    email: str
    completed_modules: int
    total_modules: int
    in_progress: int
    avg_score: int
    completion_percentage: int


@dataclass(frozen=True)
class ModuleStats:
    module_id: str
    module_title: str
    completion_rate: int
    avg_score: Optional[int]
    is_gap: bool


@dataclass(frozen=True)
class TeamOverview:
    total_technicians: int
    total_modules: int
    average_completion: int
    average_competency_score: int


@dataclass(frozen=True)
class TrendPoint:
    day: date
    avg_score: int


def _title_words(title: str, count: int) -> list[str]:
    return [w for w in title.lower().split(" ")[:count] if w]


def competency_matches_module(entry: CompetencyEntry, module: ModuleRecord, legacy_words: int = 1) -> bool:
    """
    Explicit module link wins. Only records without a module_id fall back to the
    legacy rule: the competency name contains one of the first `legacy_words`
    words of the module title (case-insensitive).
    """
    if entry.module_id is not None:
        return entry.module_id == module.id
    name = entry.competency_name.lower()
    return any(w in name for w in _title_words(module.title, legacy_words))


def is_skill_gap(completion_rate: int, avg_score: Optional[int]) -> bool:
    if completion_rate < GAP_THRESHOLD:
        return True
    return avg_score is not None and avg_score < GAP_THRESHOLD


def _roster_ids(snapshot: TeamSnapshot) -> set[int]:
    return {t.id for t in snapshot.technicians}


def technician_stats(snapshot: TeamSnapshot) -> list[TechnicianStats]:
    """One row per technician, in roster order."""
    module_ids = {m.id for m in snapshot.modules}
    total = len(snapshot.modules)
    rows: list[TechnicianStats] = []
    for tech in snapshot.technicians:
        progress = [p for p in snapshot.progress if p.user_id == tech.id and p.module_id in module_ids]
        completed = sum(1 for p in progress if p.completed)
        in_progress = sum(1 for p in progress if not p.completed and 0 < p.progress_percentage < 100)
        avg = mean_or_none(c.score for c in snapshot.competencies if c.user_id == tech.id)
        rows.append(
            TechnicianStats(
                id=tech.id,
                full_name=tech.full_name,
                email=tech.email,
                completed_modules=completed,
                total_modules=total,
                in_progress=in_progress,
                avg_score=round_half_up(avg) if avg is not None else 0,
                completion_percentage=percent(completed, total),
            )
        )
    return rows


def module_stats(snapshot: TeamSnapshot, legacy_words: int = 1) -> list[ModuleStats]:
    """One row per module in ordering-index order."""
    roster = _roster_ids(snapshot)
    roster_size = len(roster)
    team_scores = [c for c in snapshot.competencies if c.user_id in roster]
    rows: list[ModuleStats] = []
    for m in order_modules(snapshot.modules):
        done = {p.user_id for p in snapshot.progress if p.module_id == m.id and p.completed and p.user_id in roster}
        rate = percent(len(done), roster_size)
        avg = mean_or_none(c.score for c in team_scores if competency_matches_module(c, m, legacy_words))
        avg_score = round_half_up(avg) if avg is not None else None
        rows.append(
            ModuleStats(
                module_id=m.id,
                module_title=m.title,
                completion_rate=rate,
                avg_score=avg_score,
                is_gap=is_skill_gap(rate, avg_score),
            )
        )
    return rows


def skill_gaps(stats: Iterable[ModuleStats]) -> list[ModuleStats]:
    """Flagged modules, lowest completion first."""
    return sorted((s for s in stats if s.is_gap), key=lambda s: s.completion_rate)


def leaderboard(stats: Iterable[TechnicianStats]) -> list[TechnicianStats]:
    """Descending by avg_score; sorted() is stable so ties keep roster order."""
    return sorted(stats, key=lambda s: s.avg_score, reverse=True)


def score_bucket(score: float) -> str:
    """[90,100] excellent, [70,90) good, [50,70) needs improvement, [0,50) critical."""
    if score >= 90:
        return BUCKET_EXCELLENT
    if score >= 70:
        return BUCKET_GOOD
    if score >= 50:
        return BUCKET_NEEDS_IMPROVEMENT
    return BUCKET_CRITICAL


def score_distribution(scores: Iterable[float]) -> "OrderedDict[str, int]":
    counts: "OrderedDict[str, int]" = OrderedDict((b, 0) for b in BUCKETS)
    for s in scores:
        counts[score_bucket(s)] += 1
    return counts


def team_overview(snapshot: TeamSnapshot) -> TeamOverview:
    roster = _roster_ids(snapshot)
    module_ids = {m.id for m in snapshot.modules}
    completed = sum(
        1 for p in snapshot.progress if p.completed and p.user_id in roster and p.module_id in module_ids
    )
    avg = mean_or_none(c.score for c in snapshot.competencies if c.user_id in roster)
    return TeamOverview(
        total_technicians=len(roster),
        total_modules=len(module_ids),
        average_completion=percent(completed, len(roster) * len(module_ids)),
        average_competency_score=round_half_up(avg) if avg is not None else 0,
    )


def filter_roster(
    stats: Iterable[TechnicianStats],
    query: str = "",
    sort_by: str = SORT_NAME,
) -> list[TechnicianStats]:
    """Case-insensitive name/email search, then sort by name, completion or score."""
    rows = list(stats)
    q = (query or "").strip().lower()
    if q:
        rows = [r for r in rows if q in r.full_name.lower() or q in r.email.lower()]
    if sort_by == SORT_COMPLETION:
        return sorted(rows, key=lambda r: r.completion_percentage, reverse=True)
    if sort_by == SORT_SCORE:
        return leaderboard(rows)
    return sorted(rows, key=lambda r: r.full_name.lower())


def daily_score_trend(competencies: Iterable[CompetencyEntry], days: int = 14) -> list[TrendPoint]:
    """Average score per calendar day, oldest first, limited to the last `days` days that have data."""
    by_day: dict[date, list[int]] = {}
    for c in competencies:
        by_day.setdefault(c.assessed_at.date(), []).append(c.score)
    points = [
        TrendPoint(day=d, avg_score=round_half_up(sum(v) / len(v)))
        for d, v in sorted(by_day.items())
    ]
    return points[-days:] if days > 0 else points
