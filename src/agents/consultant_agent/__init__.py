from agents.consultant_agent.agent import ConsultantAgent
from agents.consultant_agent.memory import ConsultantMemory

__all__ = ["ConsultantAgent", "ConsultantMemory"]
