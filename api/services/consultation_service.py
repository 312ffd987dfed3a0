"""
AI pharmacy consultation: persist the technician's message, push it to open sockets,
ask the consultant agent for a reply and persist/push that too.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from agents.consultant_agent.memory import ConsultantMemory
from agents.core.registry import AgentRegistry
from api.models.models import ConsultationMessage
from api.services.errors import RxTrainError
from api.utils.common import iso_format
from api.ws.consultation_broadcast import broadcast_consultation_message

logger = logging.getLogger("uvicorn")

HISTORY_LIMIT = 10


class ConsultationUnavailableError(RxTrainError):
    """The model did not produce a reply. The user's message is already stored."""

    status_code = 502


@dataclass
class ConsultationExchange:
    user_message: ConsultationMessage
    ai_message: ConsultationMessage


def message_payload(m: ConsultationMessage) -> dict:
    return {
        "id": m.id,
        "message": m.message,
        "is_ai_response": bool(m.is_ai_response),
        "created_at": iso_format(m.created_at),
    }


def list_messages(db: Session, user_id: int) -> list[ConsultationMessage]:
    return (
        db.query(ConsultationMessage)
        .filter(ConsultationMessage.user_id == user_id)
        .order_by(ConsultationMessage.created_at.asc())
        .all()
    )


def store_user_message(db: Session, user_id: int, text: str) -> ConsultationMessage:
    row = ConsultationMessage(
        id=str(uuid4()),
        user_id=user_id,
        message=text,
        is_ai_response=False,
        created_at=datetime.utcnow(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


async def consult(
    db: Session,
    registry: AgentRegistry,
    *,
    user_id: int,
    text: str,
    timeout: float,
) -> ConsultationExchange:
    text = (text or "").strip()
    if not text:
        raise RxTrainError("Message must not be empty.")

    user_row = store_user_message(db, user_id, text)
    await broadcast_consultation_message(user_id, message_payload(user_row))

    memory = ConsultantMemory(
        db=db,
        user_id=user_id,
        message_cls=ConsultationMessage,
        limit=HISTORY_LIMIT,
        exclude_ids={user_row.id},
    )
    agent = registry.get("consultant", memory=memory)
    try:
        await agent.arun(text, timeout=timeout)
    except Exception as e:
        logger.warning("Consultation reply failed user_id=%s: %s", user_id, e)
        raise ConsultationUnavailableError("The consultant is unavailable right now. Please try again.") from e

    ai_row: Optional[ConsultationMessage] = memory.last_saved
    if ai_row is None:
        raise ConsultationUnavailableError("The consultant is unavailable right now. Please try again.")
    await broadcast_consultation_message(user_id, message_payload(ai_row))
    return ConsultationExchange(user_message=user_row, ai_message=ai_row)
