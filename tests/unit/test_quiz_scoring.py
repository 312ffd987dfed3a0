"""Unit tests for quiz scoring and the in-memory attempt."""
import pytest

from api.services.errors import AnswerSelectionError
from api.services.quiz_scoring import (
    PASS_THRESHOLD,
    QuizAttempt,
    correct_option_index,
    score_quiz,
)
from rx_factories import question


def _quiz(n: int):
    return [question(f"Q{i}", ["right", "wrong", "other"], "right") for i in range(n)]


@pytest.mark.unit
class TestScoreQuiz:
    def test_all_correct(self):
        result = score_quiz(_quiz(4), [0, 0, 0, 0])
        assert (result.score, result.total, result.percentage, result.passed) == (4, 4, 100, True)

    def test_boundary_exactly_70_passes(self):
        answers = [0] * 7 + [1] * 3
        result = score_quiz(_quiz(10), answers)
        assert result.percentage == PASS_THRESHOLD
        assert result.passed is True

    def test_six_of_ten_fails(self):
        result = score_quiz(_quiz(10), [0] * 6 + [1] * 4)
        assert (result.score, result.total, result.percentage, result.passed) == (6, 10, 60, False)

    def test_just_below_70_fails(self):
        # 2/3 = 66.67 -> 67
        result = score_quiz(_quiz(3), [0, 0, 1])
        assert result.percentage == 67
        assert result.passed is False

    def test_rounds_half_up(self):
        # 1/8 = 12.5 -> 13
        answers = [0] + [1] * 7
        assert score_quiz(_quiz(8), answers).percentage == 13

    def test_per_question_flags(self):
        result = score_quiz(_quiz(3), [0, 2, 0])
        assert result.per_question == (True, False, True)

    def test_idempotent(self):
        qs = _quiz(5)
        answers = [0, 1, 0, 2, 0]
        assert score_quiz(qs, answers) == score_quiz(qs, answers)

    def test_grades_by_option_text(self):
        q = question("Dose?", ["5 mg", "10 mg"], "10 mg")
        assert score_quiz([q], [1]).passed is True
        assert correct_option_index(q) == 1

    def test_duplicate_correct_text(self):
        q = question("Pick", ["A", "B", "A"], "A")
        assert correct_option_index(q) == 0
        assert score_quiz([q], [2]).score == 1

    @pytest.mark.parametrize("answers", [[0, None], [0], [0, 0, 0], [0, 3], [0, -1], [0, True]])
    def test_malformed_selection_raises(self, answers):
        with pytest.raises(AnswerSelectionError):
            score_quiz(_quiz(2), answers)

    def test_no_questions_raises(self):
        with pytest.raises(AnswerSelectionError):
            score_quiz([], [])


@pytest.mark.unit
class TestQuizAttempt:
    def test_answer_and_result(self):
        attempt = QuizAttempt(_quiz(2))
        assert attempt.answer(0, 0) is True
        assert attempt.answer(1, 1) is False
        result = attempt.result()
        assert result.score == 1
        assert result.percentage == 50
        assert result.passed is False

    def test_answered_question_cannot_change(self):
        attempt = QuizAttempt(_quiz(1))
        attempt.answer(0, 1)
        assert attempt.answer(0, 0) is False
        assert attempt.score == 0

    def test_result_before_finish_raises(self):
        attempt = QuizAttempt(_quiz(2))
        attempt.answer(0, 0)
        with pytest.raises(AnswerSelectionError):
            attempt.result()

    def test_retake_resets(self):
        attempt = QuizAttempt(_quiz(2))
        attempt.answer(0, 1)
        attempt.answer(1, 1)
        attempt.retake()
        assert attempt.score == 0
        assert attempt.finished is False
        attempt.answer(0, 0)
        attempt.answer(1, 0)
        assert attempt.result().passed is True

    def test_missing_selection_leaves_state_unchanged(self):
        attempt = QuizAttempt(_quiz(1))
        with pytest.raises(AnswerSelectionError):
            attempt.answer(0, None)
        assert attempt.answered == [False]
