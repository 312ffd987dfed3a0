"""
API data models. Single import surface for DB entities.

DB entities (api.models.models):
- User, TrainingModule, ModuleProgress, QuizQuestion, CompetencyRecord,
  OpenEndedQuestion, OpenEndedResponse, Certification, ConsultationMessage,
  TechnicianGroup, GroupMembership
"""

from api.models.models import (
    ROLE_MANAGER,
    ROLE_TECHNICIAN,
    User,
    TrainingModule,
    ModuleProgress,
    QuizQuestion,
    CompetencyRecord,
    OpenEndedQuestion,
    OpenEndedResponse,
    Certification,
    ConsultationMessage,
    TechnicianGroup,
    GroupMembership,
)

__all__ = [
    "ROLE_MANAGER",
    "ROLE_TECHNICIAN",
    "User",
    "TrainingModule",
    "ModuleProgress",
    "QuizQuestion",
    "CompetencyRecord",
    "OpenEndedQuestion",
    "OpenEndedResponse",
    "Certification",
    "ConsultationMessage",
    "TechnicianGroup",
    "GroupMembership",
]
