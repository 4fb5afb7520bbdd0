"""
Store Module
============

Node/edge stores queried by the retrieval engine.
"""

from graphrag_text2sql.store.base import SCHEMA_EDGE_LABELS, SCHEMA_NODE_LABELS, GraphStore
from graphrag_text2sql.store.memory import InMemoryGraphStore

__all__ = [
    "GraphStore",
    "InMemoryGraphStore",
    "SCHEMA_NODE_LABELS",
    "SCHEMA_EDGE_LABELS",
]
