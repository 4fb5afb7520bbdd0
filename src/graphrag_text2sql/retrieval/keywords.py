"""
Keyword Extraction
==================

Lexical tokens used to seed schema graph retrieval.
"""

import re
from typing import Iterable

# Word characters of any script, digits and underscore.
TOKEN_PATTERN = re.compile(r"\w+", re.UNICODE)

MIN_TOKEN_LENGTH = 2


def extract_keywords(question: str) -> set[str]:
    """
    Extract lower-cased tokens of at least two characters from a question.

    Args:
        question: Natural-language question in any script

    Returns:
        Set of distinct tokens
    """
    return {
        token
        for token in TOKEN_PATTERN.findall(question.lower())
        if len(token) >= MIN_TOKEN_LENGTH
    }


def merge_keywords(own: Iterable[str], external: Iterable[str]) -> set[str]:
    """Merge extracted tokens with augmenter tokens, case-insensitively."""
    merged = {t.strip().lower() for t in own}
    merged.update(t.strip().lower() for t in external)
    merged.discard("")
    return merged
