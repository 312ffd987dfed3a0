"""
ConsultantMemory: DB-backed history for the consultant agent.
load reads the user's most recent messages; save stores the assistant reply.
The user's own message is written by the caller before the run, so it can be
excluded from the loaded history by id.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional, Tuple, Type
from uuid import uuid4

from agents.core.memory import Memory

logger = logging.getLogger(__name__)


class ConsultantMemory(Memory):
    def __init__(
        self,
        *,
        db: Any,
        user_id: int,
        message_cls: Type,
        limit: int = 10,
        exclude_ids: Iterable[str] = (),
    ):
        self.db = db
        self.user_id = user_id
        self.message_cls = message_cls
        self.limit = limit
        self.exclude_ids = set(exclude_ids)
        self.last_saved: Optional[Any] = None

    def load(self) -> List[Tuple[str, str]]:
        M = self.message_cls
        q = self.db.query(M).filter(M.user_id == self.user_id)
        if self.exclude_ids:
            q = q.filter(M.id.notin_(self.exclude_ids))
        rows = q.order_by(M.created_at.desc()).limit(self.limit).all()
        # Newest-first from the query; the prompt wants chronological order
        return [("assistant" if r.is_ai_response else "user", r.message) for r in reversed(rows)]

    def save(self, input: str, result: str) -> None:
        row = self.message_cls(
            id=str(uuid4()),
            user_id=self.user_id,
            message=result,
            is_ai_response=True,
            created_at=datetime.utcnow(),
        )
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            logger.exception("Failed to save consultant reply: %s", e)
            self.db.rollback()
            raise
        self.last_saved = row
