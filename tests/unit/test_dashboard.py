"""Unit tests for the technician dashboard."""
from datetime import timedelta

import pytest

from api.services.dashboard import RECENT_SCORES, build_dashboard
from api.services.progression import module_states
from rx_factories import NOW, competency, module, progress

MODULES = [module("m1", "Orientation", 1), module("m2", "Sterile Compounding", 2), module("m3", "Inventory Control", 3)]


@pytest.mark.unit
class TestBuildDashboard:
    def test_new_technician(self):
        dash = build_dashboard(module_states(MODULES, []), [])
        assert dash.stats.completed_modules == 0
        assert dash.stats.total_modules == 3
        assert dash.stats.avg_score == 0
        assert [s.module.id for s in dash.next_steps] == ["m1"]
        assert dash.notifications == []

    def test_progress_and_scores(self):
        rows = [progress(7, "m1", completed=True, pct=100), progress(7, "m2", pct=40)]
        scores = [competency(7, "Orientation", 80), competency(7, "Orientation", 75)]
        dash = build_dashboard(module_states(MODULES, rows), scores)
        assert dash.stats.completed_modules == 1
        assert dash.stats.in_progress == 1
        assert dash.stats.completion_percentage == 33
        assert dash.stats.avg_score == 78  # 77.5
        assert [s.module.id for s in dash.next_steps] == ["m2"]

    def test_notification_for_untouched_unlock(self):
        dash = build_dashboard(module_states(MODULES, [progress(7, "m1", completed=True, pct=100)]), [])
        assert dash.notifications == ['New module unlocked: "Sterile Compounding"']

    def test_recent_scores_newest_first_and_capped(self):
        scores = [competency(7, f"c{i}", 50 + i, NOW - timedelta(days=i)) for i in range(8)]
        dash = build_dashboard(module_states(MODULES, []), scores)
        assert len(dash.recent_scores) == RECENT_SCORES
        assert dash.recent_scores[0].competency_name == "c0"
