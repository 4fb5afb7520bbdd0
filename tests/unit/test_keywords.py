"""
Unit Tests for Keyword Extraction and Augmentation
==================================================
"""

import pytest

from graphrag_text2sql.errors import AugmentationError
from graphrag_text2sql.llm.base import LLMInterface
from graphrag_text2sql.llm.mock import MockLLM
from graphrag_text2sql.models import LLMResponse
from graphrag_text2sql.retrieval.augment import (
    LLMKeywordAugmenter,
    NoOpAugmenter,
    StaticAugmenter,
)
from graphrag_text2sql.retrieval.keywords import extract_keywords, merge_keywords


class BrokenLLM(LLMInterface):
    def generate(self, prompt, system_prompt=None, temperature=0.0) -> LLMResponse:
        raise ConnectionError("llm offline")


class TestExtractKeywords:
    """Tokenization of questions into seed tokens."""

    def test_lowercases_and_splits_on_non_word(self) -> None:
        tokens = extract_keywords("Show me ALL orders, by customer_id!")
        assert tokens == {"show", "me", "all", "orders", "by", "customer_id"}

    def test_drops_single_character_tokens(self) -> None:
        assert extract_keywords("a b c") == set()

    def test_empty_question(self) -> None:
        assert extract_keywords("") == set()
        assert extract_keywords("?!") == set()

    def test_non_latin_scripts_are_word_characters(self) -> None:
        tokens = extract_keywords("顧客 注文")
        assert tokens == {"顧客", "注文"}

    def test_duplicates_collapse(self) -> None:
        assert extract_keywords("Orders orders ORDERS") == {"orders"}


class TestMergeKeywords:
    def test_merge_normalizes_external_tokens(self) -> None:
        merged = merge_keywords({"orders"}, [" Customers ", "", "ORDERS"])
        assert merged == {"orders", "customers"}

    def test_merge_with_nothing(self) -> None:
        assert merge_keywords({"orders"}, []) == {"orders"}


class TestAugmenters:
    """Keyword augmenter implementations."""

    def test_noop_adds_nothing(self) -> None:
        assert NoOpAugmenter().augment("anything") == []

    def test_static_returns_copy(self) -> None:
        augmenter = StaticAugmenter(["orders"])
        result = augmenter.augment("q")
        result.append("mutated")
        assert augmenter.augment("q") == ["orders"]

    def test_llm_augmenter_parses_comma_and_newline_lists(self) -> None:
        llm = MockLLM(default="orders, customer_id\ncustomers,  ")
        keywords = LLMKeywordAugmenter(llm).augment("顧客ごとの注文数")
        assert keywords == ["orders", "customer_id", "customers"]

    def test_llm_augmenter_caps_keyword_count(self) -> None:
        llm = MockLLM(default=",".join(f"k{i}" for i in range(20)))
        keywords = LLMKeywordAugmenter(llm, max_keywords=5).augment("q")
        assert len(keywords) == 5

    def test_llm_augmenter_sends_question_as_prompt(self) -> None:
        llm = MockLLM(default="orders")
        LLMKeywordAugmenter(llm).augment("注文の合計")
        assert llm.prompts == ["注文の合計"]

    def test_llm_failure_becomes_augmentation_error(self) -> None:
        with pytest.raises(AugmentationError, match="llm offline"):
            LLMKeywordAugmenter(BrokenLLM()).augment("q")
