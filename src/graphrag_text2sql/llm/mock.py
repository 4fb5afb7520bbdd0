"""
Mock LLM
========

Canned-response LLM for tests and the demo service.
"""

from graphrag_text2sql.llm.base import LLMInterface
from graphrag_text2sql.models import LLMResponse


class MockLLM(LLMInterface):
    """
    Mock LLM returning canned content keyed by prompt substrings.

    Keys are matched case-insensitively against the prompt. The first
    matching key wins; each match advances through that key's list of
    replies and then keeps returning the last one.
    """

    def __init__(
        self,
        responses: dict[str, list[str]] | None = None,
        default: str = "",
    ) -> None:
        self.responses = responses or {}
        self.default = default
        self.call_counts: dict[str, int] = {}
        self.prompts: list[str] = []

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.0,
    ) -> LLMResponse:
        self.prompts.append(prompt)
        for key, replies in self.responses.items():
            if key.lower() in prompt.lower():
                count = self.call_counts.get(key, 0)
                self.call_counts[key] = count + 1
                return LLMResponse(
                    content=replies[min(count, len(replies) - 1)],
                    model="mock-llm-v1",
                )

        return LLMResponse(content=self.default, model="mock-llm-v1")

    def reset(self) -> None:
        """Reset call counts for fresh test runs."""
        self.call_counts = {}
        self.prompts = []
