"""Subgraph assembly: deduplicate collected nodes and edges by id."""

from typing import Iterable, Optional, TypeVar

from graphrag_text2sql.models import ExpansionFailure, GraphContext, GraphEdge, GraphNode

T = TypeVar("T", GraphNode, GraphEdge)


def _first_by_id(items: Iterable[T]) -> tuple[T, ...]:
    seen: dict[str, T] = {}
    for item in items:
        seen.setdefault(item.id, item)
    return tuple(seen.values())


def assemble(
    nodes: Iterable[GraphNode],
    edges: Iterable[GraphEdge],
    hops_completed: int = 0,
    failure: Optional[ExpansionFailure] = None,
) -> GraphContext:
    """Build a GraphContext keeping the first occurrence of every id."""
    return GraphContext(
        nodes=_first_by_id(nodes),
        edges=_first_by_id(edges),
        hops_completed=hops_completed,
        failure=failure,
    )
