"""
AI pharmacy consultation: history, send message, realtime push over WebSocket.
"""

import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from agents.core.llm import LLM
from agents.core.registry import AgentRegistry
from api.bootstrap import build_registry, get_llm
from api.config import get_db, settings
from api.models.models import ConsultationMessage
from api.schemas.consultation_schemas import (
    ConsultationHistoryResponse,
    ConsultationMessageResponse,
    ConsultationReply,
    ConsultationRequest,
)
from api.schemas.user_schemas import User
from api.services.consultation_service import consult, list_messages
from api.services.errors import RxTrainError
from api.utils.auth import get_current_user, get_user_from_websocket
from api.utils.common import iso_format, to_http_error
from api.ws.consultation_broadcast import subscribe_consultation, unsubscribe_consultation

consultation_routes = APIRouter()
logger = logging.getLogger("uvicorn")


def get_registry(llm: LLM = Depends(get_llm)) -> AgentRegistry:
    return build_registry(llm)


def _message(m: ConsultationMessage) -> ConsultationMessageResponse:
    return ConsultationMessageResponse(
        id=m.id,
        message=m.message,
        is_ai_response=bool(m.is_ai_response),
        created_at=iso_format(m.created_at),
    )


@consultation_routes.get("/consultation/messages", response_model=ConsultationHistoryResponse)
async def get_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ConsultationHistoryResponse:
    return ConsultationHistoryResponse(messages=[_message(m) for m in list_messages(db, current_user.id)])


@consultation_routes.post("/consultation/messages", response_model=ConsultationReply)
async def send_message(
    body: ConsultationRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    registry: AgentRegistry = Depends(get_registry),
) -> ConsultationReply:
    """Stores the question, asks the consultant, stores the answer. 502 when the model fails."""
    try:
        exchange = await consult(
            db,
            registry,
            user_id=current_user.id,
            text=body.message,
            timeout=settings.llm_timeout_seconds,
        )
    except RxTrainError as e:
        raise to_http_error(e)
    return ConsultationReply(
        message=exchange.ai_message.message,
        user_message=_message(exchange.user_message),
        ai_message=_message(exchange.ai_message),
    )


@consultation_routes.websocket("/consultation/ws")
async def consultation_ws(websocket: WebSocket, db: Session = Depends(get_db)):
    """
    Push channel for the authenticated user's consultation messages.
    Auth via access_token cookie or ?token=. Client messages are ignored (keepalive).
    """
    user = get_user_from_websocket(websocket, db)
    if user is None:
        await websocket.close(code=4401)
        return
    await websocket.accept()
    subscribe_consultation(user.id, websocket)
    logger.info("consultation ws connected user_id=%s", user.id)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe_consultation(user.id, websocket)
        logger.info("consultation ws closed user_id=%s", user.id)
