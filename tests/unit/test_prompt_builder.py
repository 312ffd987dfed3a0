"""Unit tests for the core template filler and the app prompt builders (no LLM)."""
import json

import pytest

from agents.core.prompt_builder import build_from_template, render_transcript
from api.prompt_builders import (
    build_consultant_system_prompt,
    build_consultation_prompt,
    build_grader_prompt,
    build_insights_prompt,
)
from api.prompt_builders.consultant import CONSULTANT_SYSTEM_PROMPT


@pytest.mark.unit
class TestBuildFromTemplate:
    def test_fills_placeholders(self):
        assert build_from_template("Hi {name}, module {n}", name="Sam", n=2) == "Hi Sam, module 2"

    def test_missing_and_none_render_empty(self):
        assert build_from_template("[{a}][{b}]", a=None) == "[][]"

    def test_empty_template(self):
        assert build_from_template("", a=1) == ""


@pytest.mark.unit
class TestRenderTranscript:
    def test_labels_and_unknown_roles(self):
        turns = [("user", "What is USP 797?"), ("assistant", "Sterile compounding."), ("system", "x")]
        out = render_transcript(turns, {"user": "User", "assistant": "Consultant"})
        assert out.splitlines() == ["User: What is USP 797?", "Consultant: Sterile compounding.", "system: x"]

    def test_empty(self):
        assert render_transcript([], {}) == ""


@pytest.mark.unit
class TestConsultantPrompts:
    def test_system_prompt_mentions_scope(self):
        assert "scope of practice" in build_consultant_system_prompt()

    def test_extra_guidance_appended(self):
        prompt = build_consultant_system_prompt("Hospital pharmacy only.")
        assert prompt.startswith(CONSULTANT_SYSTEM_PROMPT)
        assert prompt.endswith("Hospital pharmacy only.")
        assert build_consultant_system_prompt("   ") == CONSULTANT_SYSTEM_PROMPT

    def test_conversation_layout(self):
        prompt = build_consultation_prompt(
            user_input="Can I counsel a patient?",
            history=[("user", "Hi"), ("assistant", "Hello.")],
        )
        assert prompt.startswith(CONSULTANT_SYSTEM_PROMPT)
        assert "User: Hi\nConsultant: Hello.\nUser: Can I counsel a patient?\nConsultant:" in prompt

    def test_no_history(self):
        prompt = build_consultation_prompt(user_input="Q?", system_prompt="SYS")
        assert prompt == "SYS\n\nUser: Q?\nConsultant:"


@pytest.mark.unit
class TestGraderAndInsights:
    def test_grader_includes_criteria(self):
        prompt = build_grader_prompt(
            question="Define beyond-use date.",
            answer="The date after which a compounded product should not be used.",
            good_criteria="Mentions compounded preparations",
            medium_criteria="Vague",
            bad_criteria="Confuses with expiration date",
        )
        assert "Question: Define beyond-use date." in prompt
        assert "- GOOD: Mentions compounded preparations" in prompt
        assert "- BAD: Confuses with expiration date" in prompt

    def test_insights_embeds_summary_json(self):
        summary = {"total_technicians": 3, "recent_assessments": [{"competency": "Sterile", "score": 55}]}
        prompt = build_insights_prompt(summary)
        assert json.dumps(summary, indent=2) in prompt
        assert "numbered list" in prompt
