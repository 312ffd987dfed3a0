"""
Technician dashboard and competency history.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.config import get_db
from api.models.models import TrainingModule, User as DbUser
from api.schemas.analytics_schemas import (
    CompetencyEntryResponse,
    CompetencyListResponse,
    DashboardModuleResponse,
    DashboardResponse,
    RecordCompetencyRequest,
)
from api.schemas.user_schemas import User
from api.services import training_repository as repo
from api.services.dashboard import build_dashboard
from api.services.progression import module_states
from api.services.records import CompetencyEntry
from api.utils.auth import get_current_user, require_manager
from api.utils.common import display_name, iso_format, mean_or_none, round_half_up

dashboard_routes = APIRouter()


def _entry_response(c: CompetencyEntry) -> CompetencyEntryResponse:
    return CompetencyEntryResponse(
        competency_name=c.competency_name,
        score=c.score,
        assessed_at=iso_format(c.assessed_at),
        module_id=c.module_id,
        notes=c.notes,
    )


@dashboard_routes.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DashboardResponse:
    states = module_states(repo.list_modules(db), repo.user_progress(db, current_user.id))
    dash = build_dashboard(states, repo.user_competencies(db, current_user.id))
    return DashboardResponse(
        full_name=display_name(current_user),
        completed_modules=dash.stats.completed_modules,
        total_modules=dash.stats.total_modules,
        in_progress=dash.stats.in_progress,
        completion_percentage=dash.stats.completion_percentage,
        avg_score=dash.stats.avg_score,
        next_steps=[
            DashboardModuleResponse(id=s.module.id, title=s.module.title, progress_percentage=s.progress_percentage)
            for s in dash.next_steps
        ],
        notifications=dash.notifications,
        recent_scores=[_entry_response(c) for c in dash.recent_scores],
    )


@dashboard_routes.get("/competencies", response_model=CompetencyListResponse)
async def list_competencies(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CompetencyListResponse:
    """Own assessment history, newest first."""
    entries = repo.user_competencies(db, current_user.id)
    avg = mean_or_none(c.score for c in entries)
    return CompetencyListResponse(
        competencies=[_entry_response(c) for c in entries],
        average_score=round_half_up(avg) if avg is not None else 0,
    )


@dashboard_routes.post("/competencies", response_model=CompetencyEntryResponse)
async def record_competency(
    body: RecordCompetencyRequest,
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> CompetencyEntryResponse:
    """Manager records an assessment for a technician."""
    if not 0 <= body.score <= 100:
        raise HTTPException(status_code=422, detail="Score must be between 0 and 100")
    if db.query(DbUser).filter(DbUser.id == body.user_id).first() is None:
        raise HTTPException(status_code=404, detail="User not found")
    if body.module_id is not None and db.query(TrainingModule).filter(TrainingModule.id == body.module_id).first() is None:
        raise HTTPException(status_code=404, detail="Module not found")
    entry = repo.append_competency(
        db,
        user_id=body.user_id,
        competency_name=body.competency_name.strip(),
        score=body.score,
        module_id=body.module_id,
        notes=body.notes,
    )
    return _entry_response(entry)
