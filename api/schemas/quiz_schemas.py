from pydantic import BaseModel
from typing import Optional

from api.schemas.module_schemas import ProgressResponse


class QuizSubmission(BaseModel):
    # One option index per question, in question order; null = unanswered
    answers: list[Optional[int]]


class QuizResultResponse(BaseModel):
    score: int
    total: int
    percentage: int
    passed: bool
    per_question: list[bool]
    can_retake: bool
    message: str
    progress: Optional[ProgressResponse] = None
