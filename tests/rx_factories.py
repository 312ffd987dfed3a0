"""Record builders and a scripted LLM shared by the tests."""
from datetime import datetime
from typing import Optional

from agents.core.llm import LLM
from api.services.records import (
    CompetencyEntry,
    GroupRecord,
    ModuleRecord,
    ProfileRecord,
    ProgressRecord,
    QuizQuestionRecord,
    TeamSnapshot,
)

NOW = datetime(2025, 10, 20, 12, 0, 0)


def module(mid: str, title: str, order_index: int) -> ModuleRecord:
    return ModuleRecord(id=mid, title=title, order_index=order_index)


def progress(user_id: int, module_id: str, completed: bool = False, pct: int = 0) -> ProgressRecord:
    return ProgressRecord(user_id=user_id, module_id=module_id, completed=completed, progress_percentage=pct)


def competency(
    user_id: int,
    name: str,
    score: int,
    assessed_at: datetime = NOW,
    module_id: Optional[str] = None,
) -> CompetencyEntry:
    return CompetencyEntry(user_id=user_id, competency_name=name, score=score, assessed_at=assessed_at, module_id=module_id)


def tech(uid: int, name: str) -> ProfileRecord:
    return ProfileRecord(id=uid, full_name=name, email=f"{name.lower().replace(' ', '.')}@pharmacy.test")


def question(prompt: str, options: list[str], correct: str) -> QuizQuestionRecord:
    return QuizQuestionRecord(prompt=prompt, options=tuple(options), correct_answer=correct)


def three_tech_snapshot() -> TeamSnapshot:
    """
    Technicians A, B, C; modules M1 (order 1) and M2 (order 2).
    A completed both, B completed M1 only, C completed nothing.
    Competencies: A 90 and 85 on M1, B 55 on M2. Group "Night Shift" = {B, C}.
    """
    m1 = module("m1", "Sterile Compounding", 1)
    m2 = module("m2", "Inventory Control", 2)
    return TeamSnapshot(
        technicians=[tech(1, "A"), tech(2, "B"), tech(3, "C")],
        modules=[m1, m2],
        progress=[
            progress(1, "m1", completed=True, pct=100),
            progress(1, "m2", completed=True, pct=100),
            progress(2, "m1", completed=True, pct=100),
        ],
        competencies=[
            competency(1, "Sterile Compounding", 90, module_id="m1"),
            competency(1, "Sterile Compounding", 85, module_id="m1"),
            competency(2, "Inventory Control", 55, module_id="m2"),
        ],
        groups=[GroupRecord(name="Night Shift", member_ids=frozenset({2, 3}))],
    )


class FakeLLM(LLM):
    """
    Scripted LLM: returns `reply` (or `structured`) and records prompts.
    Set `error` to make every call raise it.
    """

    def __init__(self, reply: str = "", structured=None, error: Optional[Exception] = None):
        self.reply = reply
        self.structured = structured
        self.error = error
        self.prompts: list[str] = []
        self.timeouts: list[Optional[float]] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def agenerate(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        self.timeouts.append(timeout)
        return self.generate(prompt)

    async def generate_structured(self, prompt, schema, *, timeout=None):
        self.prompts.append(prompt)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return self.structured
