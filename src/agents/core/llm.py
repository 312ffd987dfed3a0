from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class LLM(ABC):
    """
    Defines the contract for all LLMs.
    """
    @abstractmethod
    def generate(self, prompt: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def agenerate(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        """Async free-text generation bounded by `timeout` seconds."""
        raise NotImplementedError

    @abstractmethod
    async def generate_structured(self, prompt: str, schema: Type[T], *, timeout: Optional[float] = None) -> T:
        """Async generation parsed into `schema`."""
        raise NotImplementedError

    async def check_available(self, timeout: float = 5.0) -> bool:
        """Whether the backing model server answers. Never raises."""
        return True
