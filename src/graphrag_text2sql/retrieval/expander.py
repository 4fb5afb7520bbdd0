"""
Neighbor Expansion
==================

Breadth-first growth of the seed set over ``has_column`` and ``fk`` edges.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog
from opentelemetry import trace

from graphrag_text2sql.errors import StoreError, StoreTimeoutError
from graphrag_text2sql.models import (
    ExpansionFailure,
    GraphEdge,
    GraphNode,
    RetrievalErrorKind,
)
from graphrag_text2sql.retrieval.deadline import NO_DEADLINE, Deadline
from graphrag_text2sql.store.base import SCHEMA_EDGE_LABELS, GraphStore

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class ExpansionResult:
    """Raw, possibly duplicated, output of an expansion run."""

    nodes: list[GraphNode]
    edges: list[GraphEdge]
    visited_ids: set[str]
    hops_completed: int = 0
    failure: Optional[ExpansionFailure] = None
    frontier_sizes: list[int] = field(default_factory=list)


class NeighborExpander:
    """
    Expands seeds hop by hop.

    Each hop issues at most two store queries: one for every edge touching
    the visited set, one for the unvisited endpoints of those edges.
    Expansion stops early when a hop finds no new node. Per-hop fan-out is
    not bounded.

    A store failure, expired deadline or cancellation stops expansion and
    returns what earlier hops collected, with ``failure`` describing why.
    """

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    def expand(
        self,
        seeds: list[GraphNode],
        max_hops: int,
        deadline: Deadline = NO_DEADLINE,
    ) -> ExpansionResult:
        if max_hops < 0:
            raise ValueError(f"max_hops must be >= 0, got {max_hops}")

        result = ExpansionResult(
            nodes=list(seeds),
            edges=[],
            visited_ids={n.id for n in seeds},
        )

        for hop in range(max_hops):
            if not result.visited_ids:
                break

            stop = deadline.stop_reason()
            if stop is not None:
                result.failure = ExpansionFailure(
                    kind=stop,
                    hop=hop,
                    message=f"expansion stopped before hop {hop}: {stop.value}",
                )
                logger.warning("expansion_interrupted", hop=hop, reason=stop.value)
                break

            with tracer.start_as_current_span("graph.expand_hop") as span:
                span.set_attribute("graph.hop", hop)
                span.set_attribute("graph.visited", len(result.visited_ids))
                try:
                    new_nodes_found = self._expand_hop(result, deadline)
                except StoreError as e:
                    kind = (
                        RetrievalErrorKind.TIMEOUT
                        if isinstance(e, StoreTimeoutError)
                        else RetrievalErrorKind.STORE_UNAVAILABLE
                    )
                    result.failure = ExpansionFailure(kind=kind, hop=hop, message=str(e))
                    span.set_attribute("error", True)
                    logger.warning(
                        "expansion_hop_failed",
                        hop=hop,
                        kind=kind.value,
                        error=str(e),
                        hops_completed=result.hops_completed,
                    )
                    break

            result.hops_completed += 1
            if not new_nodes_found:
                logger.debug("expansion_converged", hop=hop)
                break

        return result

    def _expand_hop(self, result: ExpansionResult, deadline: Deadline) -> bool:
        """Run one hop in place. Returns False when the frontier is stable.

        Nothing is appended to ``result`` until both queries succeed, so a
        failed hop leaves the previous hops' output untouched. Each query is
        given only the time the deadline has left.
        """
        edges = self.store.query_edges_by_endpoint_in(
            result.visited_ids, SCHEMA_EDGE_LABELS, timeout=deadline.remaining()
        )

        neighbor_ids: list[str] = []
        seen: set[str] = set()
        for edge in edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in result.visited_ids and endpoint not in seen:
                    seen.add(endpoint)
                    neighbor_ids.append(endpoint)

        if not neighbor_ids:
            result.edges.extend(edges)
            result.frontier_sizes.append(0)
            return False

        nodes = self.store.query_nodes_by_id_in(neighbor_ids, timeout=deadline.remaining())

        result.edges.extend(edges)
        result.nodes.extend(nodes)
        result.visited_ids.update(neighbor_ids)
        result.frontier_sizes.append(len(neighbor_ids))
        return True
