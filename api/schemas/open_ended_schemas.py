from pydantic import BaseModel, Field
from typing import Literal, Optional


class OpenEndedGrade(BaseModel):
    """Structured output expected from the grading model."""
    grade: Literal["good", "medium", "bad"] = Field(description="Overall grade for the answer")
    feedback: str = Field(description="Constructive feedback for the technician")


class OpenEndedQuestionResponse(BaseModel):
    id: str
    question: str
    order_index: int


class OpenEndedQuestionListResponse(BaseModel):
    questions: list[OpenEndedQuestionResponse]


class OpenEndedAnswer(BaseModel):
    question_id: str
    answer: str


class OpenEndedSubmission(BaseModel):
    answers: list[OpenEndedAnswer]


class GradedResponse(BaseModel):
    id: str
    question_id: str
    question: str = ""
    answer: str
    ai_grade: Optional[str] = None
    ai_feedback: Optional[str] = None
    submitted_at: str
    graded_at: Optional[str] = None


class OpenEndedSubmissionResponse(BaseModel):
    responses: list[GradedResponse]


class UserResponses(BaseModel):
    user_id: int
    full_name: str
    email: str
    responses: list[GradedResponse]


class ModuleResponses(BaseModel):
    module_id: str
    module_title: str
    users: list[UserResponses]


class ResponsesOverview(BaseModel):
    modules: list[ModuleResponses]
