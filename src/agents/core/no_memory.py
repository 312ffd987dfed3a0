"""
No Memory implementation - stateless agents (one-shot prompts, tests).
"""

from agents.core.memory import Memory


class NoMemory(Memory):
    """Memory implementation that keeps nothing."""

    def load(self):
        return []

    def save(self, input: str, result: str):
        return None
