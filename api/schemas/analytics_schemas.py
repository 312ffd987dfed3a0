from pydantic import BaseModel
from typing import Optional


class TechnicianStatsResponse(BaseModel):
    id: int
    full_name: str
    email: str
    completed_modules: int
    total_modules: int
    in_progress: int
    avg_score: int
    completion_percentage: int


class ModuleStatsResponse(BaseModel):
    module_id: str
    module_title: str
    completion_rate: int
    avg_score: Optional[int] = None
    is_gap: bool


class TeamOverviewResponse(BaseModel):
    total_technicians: int
    total_modules: int
    average_completion: int
    average_competency_score: int


class ScoreDistributionResponse(BaseModel):
    excellent: int = 0
    good: int = 0
    needs_improvement: int = 0
    critical: int = 0


class TeamAnalyticsResponse(BaseModel):
    overview: TeamOverviewResponse
    technicians: list[TechnicianStatsResponse]
    modules: list[ModuleStatsResponse]
    skill_gaps: list[ModuleStatsResponse]
    leaderboard: list[TechnicianStatsResponse]
    distribution: ScoreDistributionResponse


class TrendPointResponse(BaseModel):
    date: str
    avg_score: int


class TrendResponse(BaseModel):
    points: list[TrendPointResponse]


class CompetencyEntryResponse(BaseModel):
    competency_name: str
    score: int
    assessed_at: str
    module_id: Optional[str] = None
    notes: Optional[str] = None


class CompetencyListResponse(BaseModel):
    competencies: list[CompetencyEntryResponse]
    average_score: int


class RecordCompetencyRequest(BaseModel):
    user_id: int
    competency_name: str
    score: int
    module_id: Optional[str] = None
    notes: Optional[str] = None


class DashboardModuleResponse(BaseModel):
    id: str
    title: str
    progress_percentage: int


class DashboardResponse(BaseModel):
    full_name: str
    completed_modules: int
    total_modules: int
    in_progress: int
    completion_percentage: int
    avg_score: int
    next_steps: list[DashboardModuleResponse]
    notifications: list[str]
    recent_scores: list[CompetencyEntryResponse]
