from pydantic import BaseModel, Field
from typing import Optional


class ModuleSummary(BaseModel):
    id: str
    title: str
    description: str = ""
    category: str = ""
    order_index: int
    duration_minutes: Optional[int] = None
    completed: bool = False
    progress_percentage: int = 0
    unlocked: bool = False


class ModuleListResponse(BaseModel):
    modules: list[ModuleSummary]
    override_active: bool = False


class QuizQuestionPublic(BaseModel):
    """Quiz question without the correct answer."""
    id: str
    prompt: str
    options: list[str]


class ModuleDetailResponse(BaseModel):
    module: ModuleSummary
    content: str = ""
    questions: list[QuizQuestionPublic] = []
    has_quiz: bool = False


class UpdateProgressRequest(BaseModel):
    progress_percentage: int = Field(ge=0, le=100)


class ProgressResponse(BaseModel):
    module_id: str
    completed: bool
    progress_percentage: int
    completed_at: Optional[str] = None
