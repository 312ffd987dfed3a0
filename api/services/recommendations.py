"""
Coaching recommendations for managers.

The rule-based half is deterministic and runs in-process:
- individual support: a technician's two most recent assessments are both below 50
- score trends: module averages over the trailing 7 days vs. before, beyond +/-10 points
- group gaps: at least 60% of a group's matched assessments on a module below 60

The remote half sends a bounded JSON summary to a language model and attaches any
non-empty reply as a low-priority informational record. A remote failure or
timeout never affects the rule output.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from agents.core.llm import LLM
from api.prompt_builders.insights import build_insights_prompt
from api.services.records import CompetencyEntry, TeamSnapshot
from api.services.team_stats import competency_matches_module
from api.utils.common import round_half_up

logger = logging.getLogger("uvicorn")

MAX_RECOMMENDATIONS = 10
COACHING_THRESHOLD = 50
GROUP_LOW_SCORE = 60
GROUP_LOW_RATIO = 60
TREND_WINDOW_DAYS = 7
TREND_DELTA = 10
# Matching in this pass also accepts the second title word for unlinked records
LEGACY_TITLE_WORDS = 2
SUMMARY_RECENT_ASSESSMENTS = 10
SUMMARY_TOP_MESSAGES = 3

SEVERITY_CRITICAL = "critical"
SEVERITY_HIGH = "high"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"
SEVERITY_RANK = {SEVERITY_CRITICAL: 0, SEVERITY_HIGH: 1, SEVERITY_WARNING: 2, SEVERITY_INFO: 3}

TYPE_INDIVIDUAL = "individual_support"
TYPE_GROUP_GAP = "group_gap"
TYPE_TREND_POSITIVE = "trend_positive"
TYPE_TREND_NEGATIVE = "trend_negative"
TYPE_AI = "ai_insights"

CATEGORY_BY_TYPE = {
    TYPE_INDIVIDUAL: "coaching",
    TYPE_GROUP_GAP: "learning_path",
    TYPE_TREND_NEGATIVE: "risk_alert",
    TYPE_TREND_POSITIVE: "trend",
    TYPE_AI: "strategic",
}


@dataclass(frozen=True)
class Recommendation:
    type: str
    severity: str
    message: str
    details: str
    action: str
    category: str = ""
    module_id: Optional[str] = None
    module: Optional[str] = None
    technician_id: Optional[int] = None
    technician_name: Optional[str] = None
    email: Optional[str] = None
    group_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RecommendationReport:
    recommendations: List[Recommendation]
    total_technicians: int
    total_modules: int
    critical_issues: int
    high_priority: int
    ai_available: bool = False


def _rec(type_: str, severity: str, **kwargs: Any) -> Recommendation:
    return Recommendation(type=type_, severity=severity, category=CATEGORY_BY_TYPE[type_], **kwargs)


def individual_support_alerts(snapshot: TeamSnapshot) -> List[Recommendation]:
    out: List[Recommendation] = []
    for tech in snapshot.technicians:
        history = sorted(
            (c for c in snapshot.competencies if c.user_id == tech.id),
            key=lambda c: c.assessed_at,
            reverse=True,
        )
        if len(history) < 2:
            continue
        latest, previous = history[0], history[1]
        if latest.score < COACHING_THRESHOLD and previous.score < COACHING_THRESHOLD:
            out.append(
                _rec(
                    TYPE_INDIVIDUAL,
                    SEVERITY_CRITICAL,
                    message=f"Technician {tech.full_name} needs targeted support: schedule 1:1 coaching or remedial training.",
                    details=(
                        f"Last two assessments: {previous.competency_name} ({previous.score}%), "
                        f"{latest.competency_name} ({latest.score}%)."
                    ),
                    action="schedule_coaching",
                    technician_id=tech.id,
                    technician_name=tech.full_name,
                    email=tech.email,
                )
            )
    return out


def _avg(entries: List[CompetencyEntry]) -> float:
    return sum(c.score for c in entries) / len(entries)


def trend_alerts(snapshot: TeamSnapshot, now: datetime) -> List[Recommendation]:
    cutoff = now - timedelta(days=TREND_WINDOW_DAYS)
    out: List[Recommendation] = []
    for m in snapshot.modules:
        matched = [c for c in snapshot.competencies if competency_matches_module(c, m, LEGACY_TITLE_WORDS)]
        recent = [c for c in matched if c.assessed_at >= cutoff]
        older = [c for c in matched if c.assessed_at < cutoff]
        if not recent or not older:
            continue
        recent_avg, older_avg = _avg(recent), _avg(older)
        delta = round_half_up(recent_avg - older_avg)
        if delta > TREND_DELTA:
            out.append(
                _rec(
                    TYPE_TREND_POSITIVE,
                    SEVERITY_INFO,
                    message=f"{m.title} scores improved by {delta}% in the last week.",
                    details=f"Average score increased from {round_half_up(older_avg)}% to {round_half_up(recent_avg)}%.",
                    action="send_encouragement",
                    module_id=m.id,
                    module=m.title,
                )
            )
        elif delta < -TREND_DELTA:
            out.append(
                _rec(
                    TYPE_TREND_NEGATIVE,
                    SEVERITY_WARNING,
                    message=f"{m.title} scores declined by {abs(delta)}% in the last week: review the training approach.",
                    details=f"Average score decreased from {round_half_up(older_avg)}% to {round_half_up(recent_avg)}%.",
                    action="review_training",
                    module_id=m.id,
                    module=m.title,
                )
            )
    return out


def group_gap_alerts(snapshot: TeamSnapshot) -> List[Recommendation]:
    out: List[Recommendation] = []
    for group in snapshot.groups:
        members = group.member_ids
        if not members:
            continue
        group_scores = [c for c in snapshot.competencies if c.user_id in members]
        for m in snapshot.modules:
            matched = [c for c in group_scores if competency_matches_module(c, m, LEGACY_TITLE_WORDS)]
            if not matched:
                continue
            low = [c for c in matched if c.score < GROUP_LOW_SCORE]
            if len(low) / len(matched) * 100 >= GROUP_LOW_RATIO:
                out.append(
                    _rec(
                        TYPE_GROUP_GAP,
                        SEVERITY_HIGH,
                        message=f"Technicians in {group.name} are behind in {m.title}: assign more training.",
                        details=f"{len(low)} out of {len(matched)} assessments scored below {GROUP_LOW_SCORE}%.",
                        action="assign_training",
                        module_id=m.id,
                        module=m.title,
                        group_name=group.name,
                    )
                )
    return out


def rule_recommendations(snapshot: TeamSnapshot, now: datetime) -> List[Recommendation]:
    """All deterministic alerts in rule order: group gaps, individuals, trends."""
    return group_gap_alerts(snapshot) + individual_support_alerts(snapshot) + trend_alerts(snapshot, now)


def build_summary(snapshot: TeamSnapshot, rules: List[Recommendation]) -> Dict[str, Any]:
    """Bounded-size statistics payload for the language model."""
    recent = sorted(snapshot.competencies, key=lambda c: c.assessed_at, reverse=True)[:SUMMARY_RECENT_ASSESSMENTS]
    return {
        "total_technicians": len(snapshot.technicians),
        "total_modules": len(snapshot.modules),
        "recent_assessments": [{"competency": c.competency_name, "score": c.score} for c in recent],
        "current_recommendations": [r.message for r in rules[:SUMMARY_TOP_MESSAGES]],
    }


async def fetch_ai_insight(
    llm: Optional[LLM],
    summary: Dict[str, Any],
    timeout: float,
) -> Optional[Recommendation]:
    """Ask the model for strategic suggestions. Any failure returns None."""
    if llm is None:
        return None
    try:
        text = await llm.agenerate(build_insights_prompt(summary), timeout=timeout)
    except Exception as e:
        # Remote inference is optional; rules stand on their own
        logger.warning("AI insights unavailable: %s", e)
        return None
    text = (text or "").strip()
    if not text:
        return None
    return _rec(
        TYPE_AI,
        SEVERITY_INFO,
        message="AI-Generated Strategic Recommendations",
        details=text,
        action="review",
    )


def prioritize(recs: Iterable[Recommendation], limit: int = MAX_RECOMMENDATIONS) -> List[Recommendation]:
    """Stable sort by severity, then cap."""
    return sorted(recs, key=lambda r: SEVERITY_RANK.get(r.severity, len(SEVERITY_RANK)))[:limit]


def filter_recommendations(
    recs: Iterable[Recommendation],
    module_id: Optional[str] = None,
    group_name: Optional[str] = None,
    technician_id: Optional[int] = None,
) -> List[Recommendation]:
    out = []
    for r in recs:
        if module_id is not None and r.module_id != module_id:
            continue
        if group_name is not None and r.group_name != group_name:
            continue
        if technician_id is not None and r.technician_id != technician_id:
            continue
        out.append(r)
    return out


async def generate_recommendations(
    snapshot: TeamSnapshot,
    *,
    now: datetime,
    llm: Optional[LLM] = None,
    timeout: float = 20.0,
    limit: int = MAX_RECOMMENDATIONS,
) -> RecommendationReport:
    rules = rule_recommendations(snapshot, now)
    ai = await fetch_ai_insight(llm, build_summary(snapshot, rules), timeout)
    everything = rules + ([ai] if ai is not None else [])
    return RecommendationReport(
        recommendations=prioritize(everything, limit),
        total_technicians=len(snapshot.technicians),
        total_modules=len(snapshot.modules),
        critical_issues=sum(1 for r in everything if r.severity == SEVERITY_CRITICAL),
        high_priority=sum(1 for r in everything if r.severity == SEVERITY_HIGH),
        ai_available=ai is not None,
    )
