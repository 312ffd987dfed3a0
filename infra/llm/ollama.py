from langchain_ollama import OllamaLLM as LangChainOllamaLLM
from langchain_ollama import ChatOllama
from agents.core.llm import LLM
from typing import Optional, Type, TypeVar
from pydantic import BaseModel
import asyncio
import logging
import time

import httpx

T = TypeVar("T", bound=BaseModel)

DEFAULT_TIMEOUT = 20.0
DEFAULT_STRUCTURED_TIMEOUT = 60.0

logger = logging.getLogger("uvicorn")


class OllamaLLM(LLM):
    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        base_url: str = "http://localhost:11434",
        default_timeout: float = DEFAULT_TIMEOUT,
    ):
        # Avoid infinite recursion: this wrapper is `OllamaLLM`, the LangChain class is aliased.
        self._llm = LangChainOllamaLLM(model=model, temperature=temperature, base_url=base_url)
        # Use ChatOllama for structured output (LangChain's recommended approach)
        self._chat_llm = ChatOllama(model=model, temperature=temperature, base_url=base_url)
        self.model = model
        self.base_url = base_url
        self.default_timeout = default_timeout

    def generate(self, prompt: str) -> str:
        return self._llm.invoke(prompt)

    async def agenerate(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        timeout_seconds = float(timeout if timeout is not None else self.default_timeout)
        start_time = time.time()
        try:
            result = await asyncio.wait_for(self._llm.ainvoke(prompt), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("LLM call timed out after %.2fs (timeout: %ss) model=%s", time.time() - start_time, timeout_seconds, self.model)
            raise TimeoutError(f"LLM call timed out after {timeout_seconds}s") from None
        logger.info("LLM call completed in %.2fs model=%s", time.time() - start_time, self.model)
        return result if isinstance(result, str) else str(result)

    async def generate_structured(
        self,
        prompt: str,
        schema: Type[T],
        *,
        timeout: Optional[float] = None,
    ) -> T:
        """
        Invoke the chat model with LangChain's native structured output and parse into `schema`.
        Raises TimeoutError when the call exceeds `timeout` seconds.
        """
        timeout_seconds = float(timeout if timeout is not None else DEFAULT_STRUCTURED_TIMEOUT)
        runnable = self._chat_llm.with_structured_output(schema)
        start_time = time.time()
        try:
            result = await asyncio.wait_for(runnable.ainvoke(prompt), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("Structured LLM call timed out after %.2fs (timeout: %ss)", time.time() - start_time, timeout_seconds)
            raise TimeoutError(f"LLM call timed out after {timeout_seconds}s") from None
        logger.info("Structured LLM call completed in %.2fs schema=%s", time.time() - start_time, schema.__name__)
        if isinstance(result, dict):
            return schema(**result)
        return result

    async def check_available(self, timeout: float = 5.0) -> bool:
        """Probe the Ollama tags endpoint. Never raises."""
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(f"{self.base_url}/api/tags")
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("Ollama connection check failed: %s", e)
            return False
