"""
Manager analytics: team overview, roster, skill gaps, leaderboard, distribution,
score trend and coaching recommendations.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from agents.core.llm import LLM
from api.bootstrap import get_llm
from api.config import get_db, settings
from api.schemas.analytics_schemas import (
    ModuleStatsResponse,
    ScoreDistributionResponse,
    TeamAnalyticsResponse,
    TeamOverviewResponse,
    TechnicianStatsResponse,
    TrendPointResponse,
    TrendResponse,
)
from api.schemas.insights_schemas import InsightsResponse, InsightsSummary, RecommendationResponse
from api.schemas.user_schemas import User
from api.services import team_stats
from api.services.recommendations import filter_recommendations, generate_recommendations
from api.services.training_repository import load_team_snapshot
from api.utils.auth import require_manager
from api.utils.logger import log_request

analytics_routes = APIRouter()
logger = logging.getLogger("uvicorn")


def _tech(s: team_stats.TechnicianStats) -> TechnicianStatsResponse:
    return TechnicianStatsResponse(
        id=s.id,
        full_name=s.full_name,
        email=s.email,
        completed_modules=s.completed_modules,
        total_modules=s.total_modules,
        in_progress=s.in_progress,
        avg_score=s.avg_score,
        completion_percentage=s.completion_percentage,
    )


def _module(s: team_stats.ModuleStats) -> ModuleStatsResponse:
    return ModuleStatsResponse(
        module_id=s.module_id,
        module_title=s.module_title,
        completion_rate=s.completion_rate,
        avg_score=s.avg_score,
        is_gap=s.is_gap,
    )


@analytics_routes.get("/analytics/team", response_model=TeamAnalyticsResponse)
async def team_analytics(
    q: str = Query("", description="Filter roster by name or email"),
    sort: str = Query(team_stats.SORT_NAME, pattern="^(name|completion|score)$"),
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> TeamAnalyticsResponse:
    with log_request(logger, "team analytics"):
        snapshot = load_team_snapshot(db)
        techs = team_stats.technician_stats(snapshot)
        modules = team_stats.module_stats(snapshot)
        overview = team_stats.team_overview(snapshot)
        roster_ids = {t.id for t in snapshot.technicians}
        distribution = team_stats.score_distribution(
            c.score for c in snapshot.competencies if c.user_id in roster_ids
        )
    return TeamAnalyticsResponse(
        overview=TeamOverviewResponse(
            total_technicians=overview.total_technicians,
            total_modules=overview.total_modules,
            average_completion=overview.average_completion,
            average_competency_score=overview.average_competency_score,
        ),
        technicians=[_tech(s) for s in team_stats.filter_roster(techs, q, sort)],
        modules=[_module(s) for s in modules],
        skill_gaps=[_module(s) for s in team_stats.skill_gaps(modules)],
        leaderboard=[_tech(s) for s in team_stats.leaderboard(techs)],
        distribution=ScoreDistributionResponse(**distribution),
    )


@analytics_routes.get("/analytics/trend", response_model=TrendResponse)
async def score_trend(
    days: int = Query(14, ge=1, le=90),
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> TrendResponse:
    snapshot = load_team_snapshot(db)
    points = team_stats.daily_score_trend(snapshot.competencies, days=days)
    return TrendResponse(points=[TrendPointResponse(date=p.day.isoformat(), avg_score=p.avg_score) for p in points])


@analytics_routes.get("/insights", response_model=InsightsResponse)
async def insights(
    module_id: Optional[str] = None,
    group_name: Optional[str] = None,
    technician_id: Optional[int] = None,
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
    llm: LLM = Depends(get_llm),
) -> InsightsResponse:
    """Rule-based alerts plus optional AI suggestions. Never fails on model errors."""
    snapshot = load_team_snapshot(db)
    with log_request(logger, "recommendations"):
        report = await generate_recommendations(
            snapshot,
            now=datetime.utcnow(),
            llm=llm,
            timeout=settings.llm_timeout_seconds,
        )
    recs = filter_recommendations(
        report.recommendations,
        module_id=module_id,
        group_name=group_name,
        technician_id=technician_id,
    )
    return InsightsResponse(
        recommendations=[RecommendationResponse(**r.to_dict()) for r in recs],
        summary=InsightsSummary(
            total_technicians=report.total_technicians,
            total_modules=report.total_modules,
            critical_issues=report.critical_issues,
            high_priority=report.high_priority,
            ai_available=report.ai_available,
        ),
    )
