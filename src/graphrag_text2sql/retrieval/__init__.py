"""
Retrieval Module
================

Keyword-seeded, hop-bounded schema subgraph retrieval.
"""

from graphrag_text2sql.retrieval.assembler import assemble
from graphrag_text2sql.retrieval.augment import (
    KeywordAugmenter,
    LLMKeywordAugmenter,
    NoOpAugmenter,
    StaticAugmenter,
)
from graphrag_text2sql.retrieval.deadline import Deadline
from graphrag_text2sql.retrieval.expander import ExpansionResult, NeighborExpander
from graphrag_text2sql.retrieval.keywords import extract_keywords, merge_keywords
from graphrag_text2sql.retrieval.render import render_relationships, render_schema
from graphrag_text2sql.retrieval.retriever import RetrievalReport, SubgraphRetriever
from graphrag_text2sql.retrieval.seeds import SeedSelector

__all__ = [
    "extract_keywords",
    "merge_keywords",
    "KeywordAugmenter",
    "NoOpAugmenter",
    "StaticAugmenter",
    "LLMKeywordAugmenter",
    "Deadline",
    "SeedSelector",
    "NeighborExpander",
    "ExpansionResult",
    "assemble",
    "render_schema",
    "render_relationships",
    "SubgraphRetriever",
    "RetrievalReport",
]
