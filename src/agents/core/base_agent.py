from abc import ABC, abstractmethod
from typing import Any, Optional

import logging

from agents.core.agent_state import AgentState
from agents.core.memory import Memory
from agents.core.no_memory import NoMemory

logger = logging.getLogger(__name__)

class BaseAgent(ABC):
    """
    Defines the lifecycle and contract for all agents.
    system_prompt: optional default set at init; can be overridden per run via state.metadata["system_prompt"].
    memory: where conversation history is loaded from and replies are saved to.
    """
    def __init__(
        self,
        *,
        name: str,
        llm: Any,
        memory: Optional[Memory] = None,
        system_prompt: str = "",
    ):
        self.name = name
        self.llm = llm
        self.memory = memory or NoMemory()
        self.system_prompt = system_prompt or ""
        self.state = AgentState()

    #-----Public API-----

    def run(self, input: str) -> str:
        self._before_run(input)

        plan = self.plan(input)
        result = self.execute(plan)

        self._after_run(input, result)
        return result

    async def arun(self, input: str, *, timeout: Optional[float] = None) -> str:
        """Async run bounded by `timeout`. Nothing is saved when execution raises."""
        self._before_run(input)
        plan = self.plan(input)
        result = await self.aexecute(plan, timeout=timeout)
        self._after_run(input, result)
        return result

    #-----------EXTENSION POINTS-----------
    @abstractmethod
    def plan(self, input: str) -> Any:
        """DECIDE WHAT TO DO NEXT"""

    @abstractmethod
    def execute(self, plan: Any) -> str:
        """EXECUTE THE PLAN"""

    @abstractmethod
    async def aexecute(self, plan: Any, *, timeout: Optional[float] = None) -> str:
        """EXECUTE THE PLAN ASYNC"""

    #-----------Hooks --------------------------------------------------------------

    def _before_run(self, input: str):
        """Load history into state. A failing history read leaves the run without context."""
        self.state.metadata["user_input"] = input
        try:
            self.state.history = list(self.memory.load())
        except Exception:
            logger.exception("agent=%s failed to load history", self.name)
            self.state.history = []

    def _after_run(self, input: str, result: str):
        """Persist the reply. Storage errors propagate to the caller."""
        self.memory.save(input, str(result))
