"""Repository tests against an in-memory SQLite session."""
from datetime import datetime

import pytest

from api.models.models import CompetencyRecord, ModuleProgress, QuizQuestion, ROLE_MANAGER
from api.services.errors import NotFoundError
from api.services.training_repository import (
    append_competency,
    create_group,
    get_module,
    list_modules,
    load_team_snapshot,
    quiz_questions,
    upsert_progress,
    user_competencies,
    user_progress,
)


@pytest.mark.unit
class TestReads:
    def test_modules_ordered(self, db_session, make_module):
        make_module("m2", "Inventory Control", 2)
        make_module("m1", "Sterile Compounding", 1)
        assert [m.id for m in list_modules(db_session)] == ["m1", "m2"]

    def test_get_module_unknown(self, db_session):
        with pytest.raises(NotFoundError):
            get_module(db_session, "nope")

    def test_quiz_questions_ordered(self, db_session, make_module):
        make_module("m1", "Sterile Compounding", 1)
        db_session.add_all([
            QuizQuestion(id="q2", module_id="m1", order_index=2, prompt="Second", options=["a", "b"], correct_answer="b"),
            QuizQuestion(id="q1", module_id="m1", order_index=1, prompt="First", options=["a", "b"], correct_answer="a"),
        ])
        db_session.commit()
        qs = quiz_questions(db_session, "m1")
        assert [q.prompt for q in qs] == ["First", "Second"]
        assert qs[0].options == ("a", "b")

    def test_snapshot_has_technicians_only(self, db_session, make_user, make_module):
        make_module("m1", "Sterile Compounding", 1)
        zed = make_user("zed@pharmacy.test", full_name="Zed")
        amy = make_user("amy@pharmacy.test", full_name="Amy")
        make_user("boss.manager@pharmacy.test", full_name="Boss", role=ROLE_MANAGER)
        create_group(db_session, "Night Shift", [zed.id])
        snap = load_team_snapshot(db_session)
        assert [t.full_name for t in snap.technicians] == ["Amy", "Zed"]
        assert snap.groups[0].member_ids == frozenset({zed.id})
        assert amy.id not in snap.groups[0].member_ids


@pytest.mark.unit
class TestWrites:
    def test_upsert_progress_is_monotonic(self, db_session, make_user, make_module):
        make_module("m1", "Sterile Compounding", 1)
        u = make_user("t@pharmacy.test")
        upsert_progress(db_session, user_id=u.id, module_id="m1", percentage=60, completed=False)
        merged = upsert_progress(db_session, user_id=u.id, module_id="m1", percentage=20, completed=False)
        assert merged.progress_percentage == 60
        assert db_session.query(ModuleProgress).count() == 1

    def test_completion_sticks(self, db_session, make_user, make_module):
        make_module("m1", "Sterile Compounding", 1)
        u = make_user("t@pharmacy.test")
        done_at = datetime(2025, 10, 1, 8, 0)
        upsert_progress(db_session, user_id=u.id, module_id="m1", percentage=100, completed=True, now=done_at)
        upsert_progress(db_session, user_id=u.id, module_id="m1", percentage=10, completed=False)
        (row,) = user_progress(db_session, u.id)
        assert row.completed is True
        assert row.progress_percentage == 100
        assert row.completed_at == done_at

    def test_append_competency_clamps_and_orders(self, db_session, make_user, make_module):
        make_module("m1", "Sterile Compounding", 1)
        u = make_user("t@pharmacy.test")
        append_competency(db_session, user_id=u.id, competency_name="Old", score=150, assessed_at=datetime(2025, 1, 1))
        append_competency(db_session, user_id=u.id, competency_name="New", score=-3, module_id="m1", assessed_at=datetime(2025, 2, 1))
        entries = user_competencies(db_session, u.id)
        assert [(e.competency_name, e.score) for e in entries] == [("New", 0), ("Old", 100)]
        assert entries[0].module_id == "m1"

    def test_uncommitted_writes_roll_back_together(self, db_session, make_user, make_module):
        make_module("m1", "Sterile Compounding", 1)
        u = make_user("t@pharmacy.test")
        upsert_progress(db_session, user_id=u.id, module_id="m1", percentage=100, completed=True, commit=False)
        append_competency(db_session, user_id=u.id, competency_name="Sterile Compounding", score=90, module_id="m1", commit=False)
        assert db_session.query(CompetencyRecord).count() == 1
        db_session.rollback()
        assert db_session.query(ModuleProgress).count() == 0
        assert db_session.query(CompetencyRecord).count() == 0
