from typing import Any, Callable, Dict
from agents.core.base_agent import BaseAgent

AgentFactory = Callable[..., BaseAgent]


class AgentRegistry:
    """Named agent factories. Each get() builds a fresh agent; kwargs go to the factory."""

    def __init__(self):
        self._factories: Dict[str, AgentFactory] = {}

    def register(self, name: str, factory: AgentFactory) -> None:
        if name in self._factories:
            raise ValueError(f"Agent {name} already registered")
        self._factories[name] = factory

    def get(self, name: str, **kwargs: Any) -> BaseAgent:
        if name not in self._factories:
            raise ValueError(f"Agent {name} not registered")
        return self._factories[name](**kwargs)

    def __contains__(self, name: str) -> bool:
        return name in self._factories
