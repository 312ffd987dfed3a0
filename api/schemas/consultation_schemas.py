from pydantic import BaseModel


class ConsultationRequest(BaseModel):
    message: str


class ConsultationMessageResponse(BaseModel):
    id: str
    message: str
    is_ai_response: bool
    created_at: str


class ConsultationHistoryResponse(BaseModel):
    messages: list[ConsultationMessageResponse]


class ConsultationReply(BaseModel):
    message: str
    user_message: ConsultationMessageResponse
    ai_message: ConsultationMessageResponse
