from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Tuple

from agents.core.base_agent import BaseAgent
from agents.core.llm import LLM
from agents.core.memory import Memory
from logging import getLogger

logger = getLogger(__name__)

# (user_input=..., history=..., system_prompt=...) -> full prompt text
PromptFn = Callable[..., str]


def _plain_prompt(*, user_input: str, history: Sequence[Tuple[str, str]] = (), system_prompt: str = "") -> str:
    lines = [system_prompt] if system_prompt else []
    lines += [f"{role}: {text}" for role, text in history]
    lines.append(f"user: {user_input}")
    return "\n".join(lines)


class ConsultantAgent(BaseAgent):
    """
    Single-turn pharmacy consultant: recent history + the new question -> one reply.
    The prompt layout is supplied by the app (build_prompt); the agent only decides
    what goes into it.
    """

    def __init__(
        self,
        *,
        name: str,
        llm: LLM,
        memory: Optional[Memory] = None,
        system_prompt: str = "",
        build_prompt: Optional[PromptFn] = None,
        max_history: int = 10,
    ):
        super().__init__(name=name, llm=llm, memory=memory, system_prompt=system_prompt)
        self.build_prompt = build_prompt or _plain_prompt
        self.max_history = max_history

    def plan(self, input: str) -> Any:
        history = (self.state.history or [])[-self.max_history:] if self.max_history > 0 else []
        system_prompt = str(self.state.metadata.get("system_prompt") or self.system_prompt or "")
        return self.build_prompt(user_input=input, history=history, system_prompt=system_prompt)

    def execute(self, plan: Any) -> str:
        return self._clean(self.llm.generate(str(plan)))

    async def aexecute(self, plan: Any, *, timeout: Optional[float] = None) -> str:
        reply = await self.llm.agenerate(str(plan), timeout=timeout)
        return self._clean(reply)

    def _clean(self, reply: Any) -> str:
        text = (reply if isinstance(reply, str) else str(reply or "")).strip()
        if not text:
            raise ValueError(f"{self.name} returned an empty reply")
        return text
