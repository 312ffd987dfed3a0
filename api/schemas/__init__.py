"""
API schemas package. Import from submodules or from this package.

Example:
    from api.schemas import ModuleListResponse, QuizResultResponse
    from api.schemas.module_schemas import ModuleListResponse
"""

from api.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
)
from api.schemas.user_schemas import User, UserProfileResponse
from api.schemas.module_schemas import (
    ModuleSummary,
    ModuleListResponse,
    QuizQuestionPublic,
    ModuleDetailResponse,
    UpdateProgressRequest,
    ProgressResponse,
)
from api.schemas.quiz_schemas import QuizSubmission, QuizResultResponse
from api.schemas.analytics_schemas import (
    TechnicianStatsResponse,
    ModuleStatsResponse,
    TeamOverviewResponse,
    ScoreDistributionResponse,
    TeamAnalyticsResponse,
    TrendPointResponse,
    TrendResponse,
    CompetencyEntryResponse,
    CompetencyListResponse,
    RecordCompetencyRequest,
    DashboardModuleResponse,
    DashboardResponse,
)
from api.schemas.insights_schemas import (
    RecommendationResponse,
    InsightsSummary,
    InsightsResponse,
    CreateGroupRequest,
    GroupResponse,
)
from api.schemas.open_ended_schemas import (
    OpenEndedGrade,
    OpenEndedQuestionResponse,
    OpenEndedQuestionListResponse,
    OpenEndedAnswer,
    OpenEndedSubmission,
    GradedResponse,
    OpenEndedSubmissionResponse,
    UserResponses,
    ModuleResponses,
    ResponsesOverview,
)
from api.schemas.consultation_schemas import (
    ConsultationRequest,
    ConsultationMessageResponse,
    ConsultationHistoryResponse,
    ConsultationReply,
)
from api.schemas.certification_schemas import (
    CreateCertificationRequest,
    CertificationResponse,
    CertificationListResponse,
)
from api.schemas.import_schemas import (
    ImportRow,
    BulkImportRequest,
    ImportSuccess,
    ImportFailure,
    BulkImportResponse,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "RegisterRequest",
    "RegisterResponse",
    # user
    "User",
    "UserProfileResponse",
    # modules
    "ModuleSummary",
    "ModuleListResponse",
    "QuizQuestionPublic",
    "ModuleDetailResponse",
    "UpdateProgressRequest",
    "ProgressResponse",
    # quiz
    "QuizSubmission",
    "QuizResultResponse",
    # analytics
    "TechnicianStatsResponse",
    "ModuleStatsResponse",
    "TeamOverviewResponse",
    "ScoreDistributionResponse",
    "TeamAnalyticsResponse",
    "TrendPointResponse",
    "TrendResponse",
    "CompetencyEntryResponse",
    "CompetencyListResponse",
    "RecordCompetencyRequest",
    "DashboardModuleResponse",
    "DashboardResponse",
    # insights
    "RecommendationResponse",
    "InsightsSummary",
    "InsightsResponse",
    "CreateGroupRequest",
    "GroupResponse",
    # open-ended
    "OpenEndedGrade",
    "OpenEndedQuestionResponse",
    "OpenEndedQuestionListResponse",
    "OpenEndedAnswer",
    "OpenEndedSubmission",
    "GradedResponse",
    "OpenEndedSubmissionResponse",
    "UserResponses",
    "ModuleResponses",
    "ResponsesOverview",
    # consultation
    "ConsultationRequest",
    "ConsultationMessageResponse",
    "ConsultationHistoryResponse",
    "ConsultationReply",
    # certifications
    "CreateCertificationRequest",
    "CertificationResponse",
    "CertificationListResponse",
    # import
    "ImportRow",
    "BulkImportRequest",
    "ImportSuccess",
    "ImportFailure",
    "BulkImportResponse",
]
