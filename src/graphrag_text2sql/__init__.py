"""
Graph RAG Text-to-SQL
=====================

Schema subgraph retrieval for grounding natural-language-to-SQL generation.
"""

from graphrag_text2sql.agent import GraphRAGAgent, SQLGenerator
from graphrag_text2sql.config import AppConfig, Neo4jConfig, RetrievalConfig
from graphrag_text2sql.errors import (
    AugmentationError,
    RetrievalError,
    StoreError,
    StoreTimeoutError,
    StoreUnavailableError,
)
from graphrag_text2sql.llm import LLMInterface, MockLLM
from graphrag_text2sql.models import (
    AskResult,
    EdgeLabel,
    ExpansionFailure,
    GeneratedSQL,
    GraphContext,
    GraphEdge,
    GraphNode,
    LLMResponse,
    NodeLabel,
    RetrievalErrorKind,
)
from graphrag_text2sql.retrieval import (
    KeywordAugmenter,
    LLMKeywordAugmenter,
    NoOpAugmenter,
    SubgraphRetriever,
    render_relationships,
    render_schema,
)
from graphrag_text2sql.seeder import SAMPLE_SCHEMA, SchemaDefinition, SchemaSeeder
from graphrag_text2sql.store import GraphStore, InMemoryGraphStore

__version__ = "0.1.0"

__all__ = [
    # Models
    "NodeLabel",
    "EdgeLabel",
    "GraphNode",
    "GraphEdge",
    "GraphContext",
    "ExpansionFailure",
    "RetrievalErrorKind",
    "AskResult",
    "GeneratedSQL",
    "LLMResponse",
    # Errors
    "RetrievalError",
    "StoreError",
    "StoreUnavailableError",
    "StoreTimeoutError",
    "AugmentationError",
    # Config
    "RetrievalConfig",
    "Neo4jConfig",
    "AppConfig",
    # Retrieval
    "SubgraphRetriever",
    "KeywordAugmenter",
    "NoOpAugmenter",
    "LLMKeywordAugmenter",
    "render_schema",
    "render_relationships",
    # Stores and seeding
    "GraphStore",
    "InMemoryGraphStore",
    "SchemaSeeder",
    "SchemaDefinition",
    "SAMPLE_SCHEMA",
    # Agent
    "GraphRAGAgent",
    "SQLGenerator",
    # LLM
    "LLMInterface",
    "MockLLM",
]
