from pydantic import BaseModel
from typing import Optional


class RecommendationResponse(BaseModel):
    type: str
    severity: str
    category: str
    message: str
    details: str
    action: str
    module_id: Optional[str] = None
    module: Optional[str] = None
    technician_id: Optional[int] = None
    technician_name: Optional[str] = None
    email: Optional[str] = None
    group_name: Optional[str] = None


class InsightsSummary(BaseModel):
    total_technicians: int
    total_modules: int
    critical_issues: int
    high_priority: int
    ai_available: bool


class InsightsResponse(BaseModel):
    recommendations: list[RecommendationResponse]
    summary: InsightsSummary


class CreateGroupRequest(BaseModel):
    name: str
    member_ids: list[int] = []


class GroupResponse(BaseModel):
    id: str
    name: str
    member_ids: list[int]
