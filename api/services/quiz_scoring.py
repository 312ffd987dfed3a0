"""
Multiple-choice quiz scoring.

Grading compares the selected option's text with the stored correct answer, so
reordering options never breaks grading. Nothing here touches the database; the
caller commits completion only for a passing result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from api.services.errors import AnswerSelectionError
from api.services.records import QuizQuestionRecord
from api.utils.common import round_half_up

PASS_THRESHOLD = 70
SELECT_ANSWER_MESSAGE = "Please select an answer for every question before submitting."


@dataclass(frozen=True)
class QuizResult:
    score: int
    total: int
    percentage: int
    passed: bool
    per_question: tuple[bool, ...] = ()


def correct_option_index(question: QuizQuestionRecord) -> Optional[int]:
    """Index of the first option whose text equals the correct answer (None if absent)."""
    for i, opt in enumerate(question.options):
        if opt == question.correct_answer:
            return i
    return None


def is_correct(question: QuizQuestionRecord, selected: int) -> bool:
    return question.options[selected] == question.correct_answer


def _validate_selection(question: QuizQuestionRecord, selected: object) -> int:
    # bool is an int subclass; True/False are not option indices
    if selected is None or isinstance(selected, bool) or not isinstance(selected, int):
        raise AnswerSelectionError(SELECT_ANSWER_MESSAGE)
    if selected < 0 or selected >= len(question.options):
        raise AnswerSelectionError(SELECT_ANSWER_MESSAGE)
    return selected


def result_from_flags(flags: Sequence[bool]) -> QuizResult:
    total = len(flags)
    score = sum(1 for f in flags if f)
    percentage = round_half_up(score / total * 100) if total else 0
    return QuizResult(
        score=score,
        total=total,
        percentage=percentage,
        passed=percentage >= PASS_THRESHOLD,
        per_question=tuple(flags),
    )


def score_quiz(questions: Sequence[QuizQuestionRecord], selected: Sequence[Optional[int]]) -> QuizResult:
    """
    Score a complete submission.

    Raises AnswerSelectionError when there are no questions, when the answer list
    length differs from the question list, or when any selection is missing or out
    of range. Scoring the same input twice yields the same result.
    """
    if not questions:
        raise AnswerSelectionError("This module has no quiz questions.")
    if len(selected) != len(questions):
        raise AnswerSelectionError(SELECT_ANSWER_MESSAGE)
    flags = [is_correct(q, _validate_selection(q, s)) for q, s in zip(questions, selected)]
    return result_from_flags(flags)


@dataclass
class QuizAttempt:
    """
    In-memory, one-question-at-a-time attempt.

    An answered question cannot be re-answered until retake(). The attempt never
    persists anything; callers read result() and decide whether to commit.
    """
    questions: Sequence[QuizQuestionRecord]
    answered: list[bool] = field(default_factory=list)
    correct: list[bool] = field(default_factory=list)
    current: int = 0

    def __post_init__(self) -> None:
        self.retake()

    @property
    def score(self) -> int:
        return sum(1 for c in self.correct if c)

    @property
    def finished(self) -> bool:
        return bool(self.questions) and all(self.answered)

    def answer(self, question_index: int, selected: Optional[int]) -> bool:
        if question_index < 0 or question_index >= len(self.questions):
            raise AnswerSelectionError(SELECT_ANSWER_MESSAGE)
        if self.answered[question_index]:
            return self.correct[question_index]
        q = self.questions[question_index]
        ok = is_correct(q, _validate_selection(q, selected))
        self.answered[question_index] = True
        self.correct[question_index] = ok
        self.current = min(question_index + 1, len(self.questions) - 1)
        return ok

    def result(self) -> QuizResult:
        if not self.finished:
            raise AnswerSelectionError(SELECT_ANSWER_MESSAGE)
        return result_from_flags(self.correct)

    def retake(self) -> None:
        n = len(self.questions)
        self.answered = [False] * n
        self.correct = [False] * n
        self.current = 0
