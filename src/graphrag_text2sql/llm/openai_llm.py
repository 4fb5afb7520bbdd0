"""
OpenAI LLM
==========

Chat-completions backed implementation of :class:`LLMInterface`.
"""

import os

import structlog
from openai import OpenAI

from graphrag_text2sql.llm.base import LLMInterface
from graphrag_text2sql.models import LLMResponse

logger = structlog.get_logger(__name__)


class OpenAILLM(LLMInterface):
    """LLM provider talking to the OpenAI (or a compatible) chat API."""

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 1000,
    ) -> None:
        self.model = model or os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
        self.max_tokens = max_tokens
        self.client = OpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL"),
        )

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.0,
    ) -> LLMResponse:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        logger.debug("llm_request", model=self.model, prompt_chars=len(prompt))
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=self.max_tokens,
        )

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=response.model,
            tokens_used=usage.total_tokens if usage else 0,
        )
