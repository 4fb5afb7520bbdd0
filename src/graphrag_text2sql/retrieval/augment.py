"""
Keyword Augmentation
====================

Optional collaborators that add vocabulary to the extracted tokens, such as
English schema terms for a question asked in another language.
"""

import re
from abc import ABC, abstractmethod

import structlog

from graphrag_text2sql.errors import AugmentationError
from graphrag_text2sql.llm.base import LLMInterface

logger = structlog.get_logger(__name__)


class KeywordAugmenter(ABC):
    """Supplies extra seed tokens for a question. Allowed to fail."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def augment(self, question: str) -> list[str]:
        """
        Produce additional keywords for ``question``.

        Raises:
            AugmentationError: If keywords could not be produced
        """
        pass


class NoOpAugmenter(KeywordAugmenter):
    """Adds nothing. Used in tests and when no LLM is configured."""

    @property
    def name(self) -> str:
        return "noop"

    def augment(self, question: str) -> list[str]:
        return []


class StaticAugmenter(KeywordAugmenter):
    """Returns a fixed keyword list regardless of the question."""

    def __init__(self, keywords: list[str]) -> None:
        self.keywords = list(keywords)

    @property
    def name(self) -> str:
        return "static"

    def augment(self, question: str) -> list[str]:
        return list(self.keywords)


class LLMKeywordAugmenter(KeywordAugmenter):
    """
    Asks an LLM for short English keywords naming likely tables and columns.

    The reply is expected as a comma or newline separated list.
    """

    SYSTEM_PROMPT = (
        "Extract 3-10 short English keywords (comma separated) relevant to "
        "SQL tables/columns from the given question. No explanations."
    )

    _SPLIT = re.compile(r"[,\n]")

    def __init__(self, llm: LLMInterface, max_keywords: int = 10) -> None:
        self.llm = llm
        self.max_keywords = max_keywords

    @property
    def name(self) -> str:
        return "llm"

    def augment(self, question: str) -> list[str]:
        try:
            response = self.llm.generate(question, system_prompt=self.SYSTEM_PROMPT, temperature=0.0)
        except Exception as e:
            raise AugmentationError(f"LLM keyword expansion failed: {e}") from e

        keywords = [part.strip() for part in self._SPLIT.split(response.content or "")]
        keywords = [k for k in keywords if k][: self.max_keywords]
        logger.debug("keywords_augmented", augmenter=self.name, keywords=keywords)
        return keywords
