"""Consultant agent, its DB-backed memory and the consultation service."""
from datetime import datetime, timedelta

import pytest

from agents.consultant_agent import ConsultantAgent, ConsultantMemory
from agents.core.registry import AgentRegistry
from api.bootstrap import build_registry
from api.models.models import ConsultationMessage
from api.prompt_builders.consultant import build_consultation_prompt
from api.services.consultation_service import ConsultationUnavailableError, consult, list_messages
from api.services.errors import RxTrainError
from rx_factories import FakeLLM


def _msg(user_id, text, is_ai, at):
    return ConsultationMessage(id=f"{user_id}-{text}", user_id=user_id, message=text, is_ai_response=is_ai, created_at=at)


@pytest.mark.unit
class TestConsultantAgent:
    def test_run_builds_prompt_and_cleans_reply(self):
        llm = FakeLLM(reply="  Refer that to the pharmacist.  ")
        agent = ConsultantAgent(name="c", llm=llm, system_prompt="SYS", build_prompt=build_consultation_prompt)
        assert agent.run("Can I recommend a dose?") == "Refer that to the pharmacist."
        assert llm.prompts[0] == "SYS\n\nUser: Can I recommend a dose?\nConsultant:"

    @pytest.mark.asyncio
    async def test_empty_reply_raises(self):
        agent = ConsultantAgent(name="c", llm=FakeLLM(reply="  "))
        with pytest.raises(ValueError):
            await agent.arun("hello", timeout=1)

    def test_registry_builds_fresh_agents(self, fake_llm):
        registry = build_registry(fake_llm)
        assert "consultant" in registry
        assert registry.get("consultant") is not registry.get("consultant")
        with pytest.raises(ValueError):
            AgentRegistry().get("consultant")


@pytest.mark.unit
class TestConsultantMemory:
    def test_load_is_chronological_and_bounded(self, db_session, make_user):
        u = make_user("t@pharmacy.test")
        base = datetime(2025, 10, 1, 9, 0)
        db_session.add_all([_msg(u.id, f"m{i}", i % 2 == 1, base + timedelta(minutes=i)) for i in range(6)])
        db_session.commit()
        memory = ConsultantMemory(db=db_session, user_id=u.id, message_cls=ConsultationMessage, limit=3, exclude_ids={f"{u.id}-m5"})
        assert memory.load() == [("user", "m2"), ("assistant", "m3"), ("user", "m4")]

    def test_save_persists_ai_row(self, db_session, make_user):
        u = make_user("t@pharmacy.test")
        memory = ConsultantMemory(db=db_session, user_id=u.id, message_cls=ConsultationMessage)
        memory.save("question", "answer")
        assert memory.last_saved.is_ai_response is True
        assert memory.last_saved.message == "answer"


@pytest.mark.unit
class TestConsult:
    @pytest.mark.asyncio
    async def test_stores_both_messages(self, db_session, make_user):
        u = make_user("t@pharmacy.test")
        llm = FakeLLM(reply="Stay within your scope.")
        exchange = await consult(db_session, build_registry(llm), user_id=u.id, text=" Can I counsel? ", timeout=2)
        assert exchange.user_message.message == "Can I counsel?"
        assert exchange.ai_message.message == "Stay within your scope."
        assert [m.is_ai_response for m in list_messages(db_session, u.id)] == [False, True]
        # the new question appears once, as the current turn
        assert llm.prompts[0].count("Can I counsel?") == 1
        assert llm.timeouts == [2]

    @pytest.mark.asyncio
    async def test_model_failure_keeps_user_message(self, db_session, make_user):
        u = make_user("t@pharmacy.test")
        llm = FakeLLM(error=TimeoutError("slow"))
        with pytest.raises(ConsultationUnavailableError):
            await consult(db_session, build_registry(llm), user_id=u.id, text="Hello?", timeout=1)
        rows = list_messages(db_session, u.id)
        assert [(m.message, m.is_ai_response) for m in rows] == [("Hello?", False)]

    @pytest.mark.asyncio
    async def test_empty_message_rejected(self, db_session, make_user, fake_llm):
        u = make_user("t@pharmacy.test")
        with pytest.raises(RxTrainError):
            await consult(db_session, build_registry(fake_llm), user_id=u.id, text="   ", timeout=1)
        assert list_messages(db_session, u.id) == []
