"""
Training module endpoints: list with unlock state, detail, progress, completion,
multiple-choice quiz and open-ended questions.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from agents.core.llm import LLM
from api.bootstrap import get_llm
from api.config import get_db, settings
from api.models.models import OpenEndedQuestion, QuizQuestion
from api.schemas.module_schemas import (
    ModuleDetailResponse,
    ModuleListResponse,
    ModuleSummary,
    ProgressResponse,
    QuizQuestionPublic,
    UpdateProgressRequest,
)
from api.schemas.open_ended_schemas import (
    GradedResponse,
    OpenEndedQuestionListResponse,
    OpenEndedQuestionResponse,
    OpenEndedSubmission,
    OpenEndedSubmissionResponse,
)
from api.schemas.quiz_schemas import QuizResultResponse, QuizSubmission
from api.schemas.user_schemas import User
from api.services import training_repository as repo
from api.services.errors import ModuleLockedError, QuizRequiredError, RxTrainError
from api.services.grading_service import submit_answers
from api.services.progression import ModuleState, is_unlocked, module_states, unlocked_indices
from api.services.quiz_scoring import score_quiz
from api.services.records import ProgressRecord, ViewerContext
from api.utils.auth import get_current_user, viewer_context
from api.utils.common import iso_format, to_http_error

module_routes = APIRouter()
logger = logging.getLogger("uvicorn")


def _states(db: Session, user_id: int) -> list[ModuleState]:
    return module_states(repo.list_modules(db), repo.user_progress(db, user_id))


def _summary(state: ModuleState, unlocked: bool) -> ModuleSummary:
    m = state.module
    return ModuleSummary(
        id=m.id,
        title=m.title,
        description=m.description,
        category=m.category,
        order_index=m.order_index,
        duration_minutes=m.duration_minutes,
        completed=state.completed,
        progress_percentage=state.progress_percentage,
        unlocked=unlocked,
    )


def _progress_response(p: ProgressRecord) -> ProgressResponse:
    return ProgressResponse(
        module_id=p.module_id,
        completed=p.completed,
        progress_percentage=p.progress_percentage,
        completed_at=iso_format(p.completed_at) if p.completed_at else None,
    )


def _require_open(db: Session, module_id: str, ctx: ViewerContext) -> list[ModuleState]:
    """404 for unknown modules, 403 for locked ones."""
    repo.get_module(db, module_id)
    states = _states(db, ctx.user_id)
    if not is_unlocked(states, module_id, ctx):
        raise ModuleLockedError("Complete the previous module to unlock this one.")
    return states


@module_routes.get("/modules", response_model=ModuleListResponse)
async def list_modules(
    override: bool = Query(False, description="Manager-only: view every module unlocked"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ModuleListResponse:
    """Modules in order with this user's progress and unlock flags."""
    ctx = viewer_context(current_user, override)
    states = _states(db, current_user.id)
    unlocked = unlocked_indices(states, ctx)
    return ModuleListResponse(
        modules=[_summary(s, i in unlocked) for i, s in enumerate(states)],
        override_active=ctx.bypass_unlock,
    )


@module_routes.get("/modules/{module_id}", response_model=ModuleDetailResponse)
async def get_module(
    module_id: str,
    override: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ModuleDetailResponse:
    ctx = viewer_context(current_user, override)
    try:
        states = _require_open(db, module_id, ctx)
    except RxTrainError as e:
        raise to_http_error(e)
    state = next(s for s in states if s.module.id == module_id)
    module = repo.get_module(db, module_id)
    questions = (
        db.query(QuizQuestion)
        .filter(QuizQuestion.module_id == module_id)
        .order_by(QuizQuestion.order_index.asc())
        .all()
    )
    return ModuleDetailResponse(
        module=_summary(state, True),
        content=module.content or "",
        questions=[QuizQuestionPublic(id=q.id, prompt=q.prompt, options=list(q.options or [])) for q in questions],
        has_quiz=bool(questions),
    )


@module_routes.put("/modules/{module_id}/progress", response_model=ProgressResponse)
async def update_progress(
    module_id: str,
    body: UpdateProgressRequest,
    override: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProgressResponse:
    """Partial progress. Never lowers the stored percentage and never un-completes."""
    ctx = viewer_context(current_user, override)
    try:
        _require_open(db, module_id, ctx)
    except RxTrainError as e:
        raise to_http_error(e)
    merged = repo.upsert_progress(
        db,
        user_id=current_user.id,
        module_id=module_id,
        percentage=body.progress_percentage,
        completed=False,
    )
    return _progress_response(merged)


@module_routes.post("/modules/{module_id}/complete", response_model=ProgressResponse)
async def complete_module(
    module_id: str,
    override: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProgressResponse:
    """Mark a module without a quiz as complete. Modules with a quiz complete by passing it."""
    ctx = viewer_context(current_user, override)
    try:
        _require_open(db, module_id, ctx)
        if repo.quiz_questions(db, module_id):
            raise QuizRequiredError("Pass the module quiz to complete this module.")
    except RxTrainError as e:
        raise to_http_error(e)
    merged = repo.upsert_progress(db, user_id=current_user.id, module_id=module_id, percentage=100, completed=True)
    return _progress_response(merged)


@module_routes.post("/modules/{module_id}/quiz", response_model=QuizResultResponse)
async def submit_quiz(
    module_id: str,
    body: QuizSubmission,
    override: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> QuizResultResponse:
    """
    Score a full submission. A pass commits completion and records the score as a
    module-linked competency; a fail stores nothing and offers a retake.
    """
    ctx = viewer_context(current_user, override)
    try:
        _require_open(db, module_id, ctx)
        result = score_quiz(repo.quiz_questions(db, module_id), body.answers)
    except RxTrainError as e:
        raise to_http_error(e)

    progress: Optional[ProgressResponse] = None
    if result.passed:
        now = datetime.utcnow()
        module = repo.get_module(db, module_id)
        # Completion and score are stored together or not at all
        try:
            merged = repo.upsert_progress(
                db, user_id=current_user.id, module_id=module_id, percentage=100, completed=True, now=now, commit=False
            )
            repo.append_competency(
                db,
                user_id=current_user.id,
                module_id=module_id,
                competency_name=module.title,
                score=result.percentage,
                notes="Module quiz",
                assessed_at=now,
                commit=False,
            )
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Quiz commit failed user=%s module=%s", current_user.id, module_id)
            raise
        progress = _progress_response(merged)
        message = f"Congratulations! You passed with {result.percentage}%."
    else:
        message = f"You scored {result.percentage}%. You need 70% to pass. Please try again."

    return QuizResultResponse(
        score=result.score,
        total=result.total,
        percentage=result.percentage,
        passed=result.passed,
        per_question=list(result.per_question),
        can_retake=not result.passed,
        message=message,
        progress=progress,
    )


@module_routes.get("/modules/{module_id}/open-ended", response_model=OpenEndedQuestionListResponse)
async def list_open_ended(
    module_id: str,
    override: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> OpenEndedQuestionListResponse:
    ctx = viewer_context(current_user, override)
    try:
        _require_open(db, module_id, ctx)
    except RxTrainError as e:
        raise to_http_error(e)
    rows = (
        db.query(OpenEndedQuestion)
        .filter(OpenEndedQuestion.module_id == module_id)
        .order_by(OpenEndedQuestion.order_index.asc())
        .all()
    )
    return OpenEndedQuestionListResponse(
        questions=[OpenEndedQuestionResponse(id=q.id, question=q.question, order_index=q.order_index) for q in rows]
    )


@module_routes.post("/modules/{module_id}/open-ended", response_model=OpenEndedSubmissionResponse)
async def submit_open_ended(
    module_id: str,
    body: OpenEndedSubmission,
    override: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    llm: LLM = Depends(get_llm),
) -> OpenEndedSubmissionResponse:
    """Store written answers and grade each one good/medium/bad."""
    if not body.answers:
        raise HTTPException(status_code=400, detail="No answers submitted")
    ctx = viewer_context(current_user, override)
    try:
        _require_open(db, module_id, ctx)
        rows = await submit_answers(
            db,
            llm,
            user_id=current_user.id,
            module_id=module_id,
            answers=body.answers,
            timeout=settings.llm_timeout_seconds,
        )
    except RxTrainError as e:
        raise to_http_error(e)
    return OpenEndedSubmissionResponse(
        responses=[
            GradedResponse(
                id=r.id,
                question_id=r.question_id,
                question=r.question.question if r.question else "",
                answer=r.answer,
                ai_grade=r.ai_grade,
                ai_feedback=r.ai_feedback,
                submitted_at=iso_format(r.submitted_at),
                graded_at=iso_format(r.graded_at) if r.graded_at else None,
            )
            for r in rows
        ]
    )
