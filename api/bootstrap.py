from functools import lru_cache

from agents.core.llm import LLM
from agents.core.registry import AgentRegistry
from agents.consultant_agent.agent import ConsultantAgent

from api.config import settings
from api.prompt_builders.consultant import build_consultant_system_prompt, build_consultation_prompt
from infra.llm.ollama import OllamaLLM


@lru_cache(maxsize=1)
def get_llm() -> LLM:
    """Process-wide model client. Routes depend on this so tests can override it."""
    return OllamaLLM(
        model=settings.ollama_model,
        base_url=settings.ollama_base_url,
        default_timeout=settings.llm_timeout_seconds,
    )


def build_registry(llm: LLM) -> AgentRegistry:
    registry = AgentRegistry()

    registry.register(
        "consultant",
        lambda memory=None: ConsultantAgent(
            name="PharmacyConsultant",
            llm=llm,
            memory=memory,
            system_prompt=build_consultant_system_prompt(),
            build_prompt=build_consultation_prompt,
            max_history=10,
        ),
    )

    return registry
