from abc import ABC, abstractmethod
from typing import List, Tuple


class Memory(ABC):
    """Memory interface: load the conversation so far, save each reply."""

    @abstractmethod
    def load(self) -> List[Tuple[str, str]]:
        """Chronological (role, text) pairs; role is "user" or "assistant"."""
        pass

    @abstractmethod
    def save(self, input: str, result: str) -> None:
        """Persist the reply produced for `input`."""
        pass
