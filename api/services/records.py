"""
Typed records for the progression / scoring engine.

Store rows are mapped to these frozen dataclasses at the repository boundary so the
aggregation code never sees ORM objects or optional-chained dicts. Defaults for
missing values are applied here, once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from api.models.models import ROLE_MANAGER, ROLE_TECHNICIAN


@dataclass(frozen=True)
class ModuleRecord:
    id: str
    title: str
    order_index: int = 0
    description: str = ""
    category: str = ""
    duration_minutes: Optional[int] = None


@dataclass(frozen=True)
class ProgressRecord:
    user_id: int
    module_id: str
    completed: bool = False
    progress_percentage: int = 0
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class CompetencyEntry:
    user_id: int
    competency_name: str
    score: int
    assessed_at: datetime
    module_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ProfileRecord:
    id: int
    full_name: str
    email: str
    role: str = ROLE_TECHNICIAN


@dataclass(frozen=True)
class QuizQuestionRecord:
    prompt: str
    options: tuple[str, ...]
    correct_answer: str
    id: Optional[str] = None


@dataclass(frozen=True)
class GroupRecord:
    name: str
    member_ids: frozenset[int] = field(default_factory=frozenset)
    id: Optional[str] = None


@dataclass(frozen=True)
class CertificationRecord:
    id: str
    user_id: int
    certification_name: str
    issue_date: date
    expiration_date: date


@dataclass(frozen=True)
class ViewerContext:
    """Session-scoped view configuration passed into the aggregators."""
    user_id: int
    role: str = ROLE_TECHNICIAN
    manager_override: bool = False

    @property
    def is_manager(self) -> bool:
        return self.role == ROLE_MANAGER

    @property
    def bypass_unlock(self) -> bool:
        # Override is a manager-only affordance
        return self.is_manager and self.manager_override


@dataclass(frozen=True)
class TeamSnapshot:
    """Everything the team-level aggregators need, fetched wholesale."""
    technicians: list[ProfileRecord]
    modules: list[ModuleRecord]
    progress: list[ProgressRecord]
    competencies: list[CompetencyEntry]
    groups: list[GroupRecord] = field(default_factory=list)
