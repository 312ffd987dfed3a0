"""
Store access for the progression engine: fetch-all, upsert and append.

Rows are mapped to the frozen records in api.services.records here so the
aggregators never see ORM objects.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from api.models.models import (
    CompetencyRecord,
    GroupMembership,
    ModuleProgress,
    QuizQuestion,
    TechnicianGroup,
    TrainingModule,
    User,
    ROLE_TECHNICIAN,
)
from api.services.errors import NotFoundError
from api.services.progression import merge_progress
from api.services.records import (
    CompetencyEntry,
    GroupRecord,
    ModuleRecord,
    ProfileRecord,
    ProgressRecord,
    QuizQuestionRecord,
    TeamSnapshot,
)


def to_module_record(m: TrainingModule) -> ModuleRecord:
    return ModuleRecord(
        id=m.id,
        title=m.title or "",
        order_index=int(m.order_index or 0),
        description=m.description or "",
        category=m.category or "",
        duration_minutes=m.duration_minutes,
    )


def to_progress_record(p: ModuleProgress) -> ProgressRecord:
    return ProgressRecord(
        user_id=int(p.user_id),
        module_id=p.module_id,
        completed=bool(p.completed),
        progress_percentage=int(p.progress_percentage or 0),
        completed_at=p.completed_at,
    )


def to_competency_entry(c: CompetencyRecord) -> CompetencyEntry:
    return CompetencyEntry(
        user_id=int(c.user_id),
        competency_name=c.competency_name or "",
        score=int(c.score or 0),
        assessed_at=c.assessed_at,
        module_id=c.module_id,
        notes=c.notes,
    )


def to_profile_record(u: User) -> ProfileRecord:
    return ProfileRecord(id=int(u.id), full_name=u.full_name or "", email=u.email or "", role=u.role or ROLE_TECHNICIAN)


def to_question_record(q: QuizQuestion) -> QuizQuestionRecord:
    options = q.options if isinstance(q.options, list) else []
    return QuizQuestionRecord(
        id=q.id,
        prompt=q.prompt or "",
        options=tuple(str(o) for o in options),
        correct_answer=q.correct_answer or "",
    )


# ----- Reads -----

def list_modules(db: Session) -> list[ModuleRecord]:
    rows = db.query(TrainingModule).order_by(TrainingModule.order_index.asc()).all()
    return [to_module_record(m) for m in rows]


def get_module(db: Session, module_id: str) -> TrainingModule:
    m = db.query(TrainingModule).filter(TrainingModule.id == module_id).first()
    if m is None:
        raise NotFoundError("Module not found")
    return m


def user_progress(db: Session, user_id: int) -> list[ProgressRecord]:
    rows = db.query(ModuleProgress).filter(ModuleProgress.user_id == user_id).all()
    return [to_progress_record(p) for p in rows]


def quiz_questions(db: Session, module_id: str) -> list[QuizQuestionRecord]:
    rows = (
        db.query(QuizQuestion)
        .filter(QuizQuestion.module_id == module_id)
        .order_by(QuizQuestion.order_index.asc())
        .all()
    )
    return [to_question_record(q) for q in rows]


def user_competencies(db: Session, user_id: int) -> list[CompetencyEntry]:
    rows = (
        db.query(CompetencyRecord)
        .filter(CompetencyRecord.user_id == user_id)
        .order_by(CompetencyRecord.assessed_at.desc())
        .all()
    )
    return [to_competency_entry(c) for c in rows]


def list_groups(db: Session) -> list[GroupRecord]:
    out: list[GroupRecord] = []
    for g in db.query(TechnicianGroup).order_by(TechnicianGroup.name.asc()).all():
        out.append(GroupRecord(id=g.id, name=g.name, member_ids=frozenset(int(m.user_id) for m in g.members)))
    return out


def load_team_snapshot(db: Session) -> TeamSnapshot:
    """Fetch everything the team aggregators need in one pass."""
    technicians = (
        db.query(User)
        .filter(User.role == ROLE_TECHNICIAN)
        .order_by(User.full_name.asc())
        .all()
    )
    return TeamSnapshot(
        technicians=[to_profile_record(u) for u in technicians],
        modules=list_modules(db),
        progress=[to_progress_record(p) for p in db.query(ModuleProgress).all()],
        competencies=[to_competency_entry(c) for c in db.query(CompetencyRecord).all()],
        groups=list_groups(db),
    )


# ----- Writes -----

def upsert_progress(
    db: Session,
    *,
    user_id: int,
    module_id: str,
    percentage: int,
    completed: bool,
    now: Optional[datetime] = None,
    commit: bool = True,
) -> ProgressRecord:
    """Insert or update a progress row through merge_progress. With commit=False the row is only flushed."""
    now = now or datetime.utcnow()
    row = (
        db.query(ModuleProgress)
        .filter(ModuleProgress.user_id == user_id, ModuleProgress.module_id == module_id)
        .first()
    )
    existing = to_progress_record(row) if row is not None else None
    merged = merge_progress(
        existing,
        user_id=user_id,
        module_id=module_id,
        percentage=percentage,
        completed=completed,
        now=now,
    )
    if row is None:
        row = ModuleProgress(id=str(uuid4()), user_id=user_id, module_id=module_id)
        db.add(row)
    row.completed = merged.completed
    row.progress_percentage = merged.progress_percentage
    row.completed_at = merged.completed_at
    row.last_accessed_at = now
    if commit:
        db.commit()
    else:
        db.flush()
    return merged


def append_competency(
    db: Session,
    *,
    user_id: int,
    competency_name: str,
    score: int,
    module_id: Optional[str] = None,
    notes: Optional[str] = None,
    assessed_at: Optional[datetime] = None,
    commit: bool = True,
) -> CompetencyEntry:
    row = CompetencyRecord(
        id=str(uuid4()),
        user_id=user_id,
        module_id=module_id,
        competency_name=competency_name,
        score=max(0, min(int(score), 100)),
        notes=notes,
        assessed_at=assessed_at or datetime.utcnow(),
    )
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    else:
        db.flush()
    return to_competency_entry(row)


def create_group(db: Session, name: str, member_ids: Iterable[int]) -> GroupRecord:
    group = TechnicianGroup(id=str(uuid4()), name=name)
    db.add(group)
    unique_ids = sorted(set(int(i) for i in member_ids))
    for uid in unique_ids:
        db.add(GroupMembership(id=str(uuid4()), group_id=group.id, user_id=uid))
    db.commit()
    return GroupRecord(id=group.id, name=name, member_ids=frozenset(unique_ids))
