"""
Graph Store Interface
=====================

Abstract node/edge store queried by the retrieval engine and written by the
schema seeder.
"""

from abc import ABC, abstractmethod
from typing import Collection, Iterable, Iterator

from graphrag_text2sql.models import EdgeLabel, GraphEdge, GraphNode, NodeLabel

SCHEMA_NODE_LABELS: tuple[NodeLabel, ...] = (NodeLabel.TABLE, NodeLabel.COLUMN)
SCHEMA_EDGE_LABELS: tuple[EdgeLabel, ...] = (EdgeLabel.HAS_COLUMN, EdgeLabel.FK)


class GraphStore(ABC):
    """
    Queryable node/edge store.

    Read queries are idempotent and side-effect free. Paged queries return
    an iterator of pages; each page holds at most ``limit`` nodes and the
    iterator is exhausted when the store has no more results. Implementations
    raise :class:`~graphrag_text2sql.errors.StoreError` subclasses on failure.
    """

    @abstractmethod
    def query_nodes_by_name_contains_any(
        self,
        tokens: Collection[str],
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        """Nodes with a label in ``labels`` whose name contains any token.

        Matching is case-insensitive.
        """
        pass

    @abstractmethod
    def query_all_by_label(
        self,
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        """All nodes with a label in ``labels``."""
        pass

    @abstractmethod
    def query_nodes_by_id_in(
        self,
        ids: Collection[str],
        timeout: float | None = None,
    ) -> list[GraphNode]:
        """Nodes whose id is in ``ids``.

        ``timeout`` is the time in seconds the query may take, None for the
        store default. Stores without query timeouts ignore it.
        """
        pass

    @abstractmethod
    def query_edges_by_endpoint_in(
        self,
        ids: Collection[str],
        labels: Collection[EdgeLabel],
        timeout: float | None = None,
    ) -> list[GraphEdge]:
        """Edges with a label in ``labels`` whose source or target is in ``ids``.

        ``timeout`` as for :meth:`query_nodes_by_id_in`.
        """
        pass

    @abstractmethod
    def upsert_nodes(self, nodes: Iterable[GraphNode]) -> int:
        """Create or replace nodes by id. Returns the number written."""
        pass

    @abstractmethod
    def upsert_edges(self, edges: Iterable[GraphEdge]) -> int:
        """Create or replace edges by id. Returns the number written."""
        pass

    def ping(self) -> bool:
        """Cheap reachability check used by the readiness check."""
        return True

    def close(self) -> None:
        """Release any held connections."""
