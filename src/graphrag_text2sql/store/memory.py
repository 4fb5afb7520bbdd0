"""
In-Memory Graph Store
=====================

Dictionary-backed store for tests, demos and small schemas.
"""

import threading
from collections import Counter
from typing import Collection, Iterable, Iterator

from graphrag_text2sql.models import EdgeLabel, GraphEdge, GraphNode, NodeLabel
from graphrag_text2sql.store.base import GraphStore


class InMemoryGraphStore(GraphStore):
    """
    Graph store held in process memory.

    Results come back in insertion order, so repeated queries against an
    unchanged store return identical pages. Reads take a snapshot under a
    lock and are safe from concurrent threads. ``call_counts`` records how
    many times each query method ran.
    """

    def __init__(
        self,
        nodes: Iterable[GraphNode] = (),
        edges: Iterable[GraphEdge] = (),
    ) -> None:
        self._lock = threading.RLock()
        self._nodes: dict[str, GraphNode] = {}
        self._edges: dict[str, GraphEdge] = {}
        self.call_counts: Counter = Counter()
        self.upsert_nodes(nodes)
        self.upsert_edges(edges)

    def _count(self, method: str) -> None:
        with self._lock:
            self.call_counts[method] += 1

    def _snapshot_nodes(self) -> list[GraphNode]:
        with self._lock:
            return list(self._nodes.values())

    @staticmethod
    def _paged(nodes: list[GraphNode], limit: int) -> Iterator[list[GraphNode]]:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        for start in range(0, len(nodes), limit):
            yield nodes[start:start + limit]

    def query_nodes_by_name_contains_any(
        self,
        tokens: Collection[str],
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        self._count("query_nodes_by_name_contains_any")
        needles = [t.lower() for t in tokens]
        label_set = set(labels)
        matches = [
            n
            for n in self._snapshot_nodes()
            if n.label in label_set and any(t in n.name.lower() for t in needles)
        ]
        return self._paged(matches, limit)

    def query_all_by_label(
        self,
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        self._count("query_all_by_label")
        label_set = set(labels)
        matches = [n for n in self._snapshot_nodes() if n.label in label_set]
        return self._paged(matches, limit)

    def query_nodes_by_id_in(
        self,
        ids: Collection[str],
        timeout: float | None = None,
    ) -> list[GraphNode]:
        self._count("query_nodes_by_id_in")
        wanted = set(ids)
        return [n for n in self._snapshot_nodes() if n.id in wanted]

    def query_edges_by_endpoint_in(
        self,
        ids: Collection[str],
        labels: Collection[EdgeLabel],
        timeout: float | None = None,
    ) -> list[GraphEdge]:
        self._count("query_edges_by_endpoint_in")
        wanted = set(ids)
        label_set = set(labels)
        with self._lock:
            edges = list(self._edges.values())
        return [
            e
            for e in edges
            if e.label in label_set and (e.source in wanted or e.target in wanted)
        ]

    def upsert_nodes(self, nodes: Iterable[GraphNode]) -> int:
        written = 0
        with self._lock:
            for node in nodes:
                self._nodes[node.id] = node
                written += 1
        return written

    def upsert_edges(self, edges: Iterable[GraphEdge]) -> int:
        written = 0
        with self._lock:
            for edge in edges:
                self._edges[edge.id] = edge
                written += 1
        return written

    @property
    def node_count(self) -> int:
        with self._lock:
            return len(self._nodes)

    @property
    def edge_count(self) -> int:
        with self._lock:
            return len(self._edges)
