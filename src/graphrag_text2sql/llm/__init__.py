"""
LLM Module
==========

Pluggable LLM interfaces for keyword augmentation and SQL generation.
"""

from graphrag_text2sql.llm.base import LLMInterface
from graphrag_text2sql.llm.mock import MockLLM
from graphrag_text2sql.llm.openai_llm import OpenAILLM

__all__ = [
    "LLMInterface",
    "MockLLM",
    "OpenAILLM",
]
