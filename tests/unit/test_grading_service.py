"""Open-ended grading: structured model output, fallback grade, validation."""
import pytest

from api.models.models import OpenEndedQuestion, OpenEndedResponse
from api.schemas.open_ended_schemas import OpenEndedAnswer, OpenEndedGrade
from api.services.errors import NotFoundError, RxTrainError
from api.services.grading_service import FALLBACK_GRADE, submit_answers
from rx_factories import FakeLLM


@pytest.fixture
def question(db_session, make_module):
    make_module("m1", "Sterile Compounding", 1)
    q = OpenEndedQuestion(
        id="oq1",
        module_id="m1",
        question="Why is hand hygiene critical before compounding?",
        good_answer_criteria="Mentions contamination and patient safety",
        medium_answer_criteria="Mentions cleanliness only",
        bad_answer_criteria="Off topic",
    )
    db_session.add(q)
    db_session.commit()
    return q


@pytest.mark.unit
class TestSubmitAnswers:
    @pytest.mark.asyncio
    async def test_model_grade_stored(self, db_session, make_user, question):
        u = make_user("t@pharmacy.test")
        llm = FakeLLM(structured=OpenEndedGrade(grade="good", feedback="Clear and complete."))
        (row,) = await submit_answers(
            db_session, llm, user_id=u.id, module_id="m1",
            answers=[OpenEndedAnswer(question_id="oq1", answer="  Prevents contamination.  ")],
            timeout=3,
        )
        assert row.answer == "Prevents contamination."
        assert (row.ai_grade, row.ai_feedback) == ("good", "Clear and complete.")
        assert row.graded_at is not None
        assert "Mentions contamination and patient safety" in llm.prompts[0]
        assert llm.timeouts == [3]

    @pytest.mark.asyncio
    async def test_model_failure_uses_fallback(self, db_session, make_user, question):
        u = make_user("t@pharmacy.test")
        llm = FakeLLM(error=TimeoutError("slow"))
        (row,) = await submit_answers(
            db_session, llm, user_id=u.id, module_id="m1",
            answers=[OpenEndedAnswer(question_id="oq1", answer="Keeps things clean.")],
            timeout=1,
        )
        assert row.ai_grade == FALLBACK_GRADE.grade == "medium"
        assert row.ai_feedback == FALLBACK_GRADE.feedback

    @pytest.mark.asyncio
    async def test_blank_answer_rejected_before_storing(self, db_session, make_user, question):
        u = make_user("t@pharmacy.test")
        with pytest.raises(RxTrainError):
            await submit_answers(
                db_session, FakeLLM(), user_id=u.id, module_id="m1",
                answers=[OpenEndedAnswer(question_id="oq1", answer="   ")],
                timeout=1,
            )
        assert db_session.query(OpenEndedResponse).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_question(self, db_session, make_user, question):
        u = make_user("t@pharmacy.test")
        with pytest.raises(NotFoundError):
            await submit_answers(
                db_session, FakeLLM(), user_id=u.id, module_id="m1",
                answers=[OpenEndedAnswer(question_id="other", answer="x")],
                timeout=1,
            )
