"""
Base LLM Interface
==================

Abstract interface for LLM providers used by keyword augmentation and SQL
generation.
"""

from abc import ABC, abstractmethod

from graphrag_text2sql.models import LLMResponse


class LLMInterface(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt for context
            temperature: Sampling temperature; 0 for deterministic output

        Returns:
            LLMResponse with generated content
        """
        pass
