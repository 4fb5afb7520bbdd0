"""
Seed Selection
==============

Picks the initial nodes of a retrieval by keyword match against node names.
"""

from typing import Collection

import structlog

from graphrag_text2sql.errors import RetrievalError, StoreError
from graphrag_text2sql.models import GraphNode
from graphrag_text2sql.store.base import SCHEMA_NODE_LABELS, GraphStore

logger = structlog.get_logger(__name__)


class SeedSelector:
    """Selects up to ``top_k`` table/column nodes matching a token set."""

    def __init__(self, store: GraphStore, page_size: int = 100) -> None:
        self.store = store
        self.page_size = page_size

    def select_seeds(self, tokens: Collection[str], top_k: int) -> list[GraphNode]:
        """
        Query the store for seed nodes.

        Non-empty ``tokens`` select nodes whose name contains any token. An
        empty token set falls back to sampling all table and column nodes.
        Pages are read until the store is exhausted or ``top_k`` nodes are
        in hand, and the result is truncated to ``top_k``.

        Args:
            tokens: Lower-cased seed tokens
            top_k: Maximum number of seeds (>= 1)

        Returns:
            Seed nodes in store order

        Raises:
            RetrievalError: If the store query fails
        """
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")

        limit = min(top_k, self.page_size)
        tokens = sorted(tokens)
        seeds: list[GraphNode] = []
        try:
            if tokens:
                pages = self.store.query_nodes_by_name_contains_any(tokens, SCHEMA_NODE_LABELS, limit)
            else:
                logger.info("seed_fallback_all_nodes", top_k=top_k)
                pages = self.store.query_all_by_label(SCHEMA_NODE_LABELS, limit)

            for page in pages:
                seeds.extend(page)
                if len(seeds) >= top_k:
                    break
        except StoreError as e:
            logger.error("seed_selection_failed", error=str(e), token_count=len(tokens))
            raise RetrievalError.from_store_error(e, "seed selection") from e

        seeds = seeds[:top_k]
        logger.debug("seeds_selected", count=len(seeds), tokens=tokens)
        return seeds
