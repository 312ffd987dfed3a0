"""
Open-ended answers: store the technician's written answer and grade it with the model.

Grading never fails the submission. When the model is unreachable, times out or
returns something unparsable, the response is stored with a "medium" grade and a
note asking for instructor review.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence
from uuid import uuid4

from sqlalchemy.orm import Session

from agents.core.llm import LLM
from api.models.models import OpenEndedQuestion, OpenEndedResponse
from api.prompt_builders.grader import build_grader_prompt
from api.schemas.open_ended_schemas import OpenEndedAnswer, OpenEndedGrade
from api.services.errors import NotFoundError, RxTrainError

logger = logging.getLogger("uvicorn")

FALLBACK_GRADE = OpenEndedGrade(
    grade="medium",
    feedback="Unable to grade automatically. Please review with an instructor.",
)


async def grade_answer(
    llm: Optional[LLM],
    question: OpenEndedQuestion,
    answer: str,
    *,
    timeout: float,
) -> OpenEndedGrade:
    if llm is None:
        return FALLBACK_GRADE
    prompt = build_grader_prompt(
        question=question.question,
        answer=answer,
        good_criteria=question.good_answer_criteria,
        medium_criteria=question.medium_answer_criteria,
        bad_criteria=question.bad_answer_criteria,
    )
    try:
        grade = await llm.generate_structured(prompt, OpenEndedGrade, timeout=timeout)
    except Exception as e:
        logger.warning("Open-ended grading failed question_id=%s: %s", question.id, e)
        return FALLBACK_GRADE
    if not isinstance(grade, OpenEndedGrade):
        logger.warning("Open-ended grading returned no grade question_id=%s", question.id)
        return FALLBACK_GRADE
    return grade


async def submit_answers(
    db: Session,
    llm: Optional[LLM],
    *,
    user_id: int,
    module_id: str,
    answers: Sequence[OpenEndedAnswer],
    timeout: float,
) -> list[OpenEndedResponse]:
    """Persist each answer first, then grade and update it. Blank answers are rejected."""
    questions = {
        q.id: q
        for q in db.query(OpenEndedQuestion).filter(OpenEndedQuestion.module_id == module_id).all()
    }
    for a in answers:
        if a.question_id not in questions:
            raise NotFoundError(f"Question {a.question_id} not found in this module")
        if not a.answer.strip():
            raise RxTrainError("Please provide an answer for every question.")

    saved: list[OpenEndedResponse] = []
    for a in answers:
        row = OpenEndedResponse(
            id=str(uuid4()),
            user_id=user_id,
            question_id=a.question_id,
            module_id=module_id,
            answer=a.answer.strip(),
            submitted_at=datetime.utcnow(),
        )
        db.add(row)
        db.commit()
        grade = await grade_answer(llm, questions[a.question_id], row.answer, timeout=timeout)
        row.ai_grade = grade.grade
        row.ai_feedback = grade.feedback
        row.graded_at = datetime.utcnow()
        db.commit()
        db.refresh(row)
        saved.append(row)
    return saved
