"""
Data Models
===========

Core data structures for schema subgraph retrieval.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class NodeLabel(str, Enum):
    """Kind of a schema graph node."""

    TABLE = "table"
    COLUMN = "column"


class EdgeLabel(str, Enum):
    """Kind of a schema graph edge."""

    HAS_COLUMN = "has_column"
    FK = "fk"


class RetrievalErrorKind(str, Enum):
    """Structured failure categories surfaced by the retrieval engine."""

    STORE_UNAVAILABLE = "store_unavailable"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class GraphNode:
    """A table or column in the schema graph.

    ``name`` is the qualified name (``schema.table``) for tables and the bare
    column name for columns. ``table`` holds the owning table's qualified
    name and is only set on column nodes. ``pk`` is the store partition key.
    """

    id: str
    label: NodeLabel
    name: str
    table: Optional[str] = None
    pk: str = ""

    @property
    def is_table(self) -> bool:
        return self.label == NodeLabel.TABLE

    @property
    def is_column(self) -> bool:
        return self.label == NodeLabel.COLUMN


@dataclass(frozen=True)
class GraphEdge:
    """A directed relation between two nodes.

    ``has_column`` edges point table -> column. ``fk`` edges point from the
    referencing column to the referenced column.
    """

    id: str
    label: EdgeLabel
    source: str
    target: str
    pk: str = ""


@dataclass(frozen=True)
class ExpansionFailure:
    """Why neighbor expansion stopped before finishing its hops."""

    kind: RetrievalErrorKind
    hop: int
    message: str


@dataclass(frozen=True)
class GraphContext:
    """Deduplicated subgraph returned by a retrieval call."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    hops_completed: int = 0
    failure: Optional[ExpansionFailure] = None

    @property
    def partial(self) -> bool:
        """True when expansion was cut short and the subgraph is best-effort."""
        return self.failure is not None

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.nodes)

    @property
    def edge_ids(self) -> frozenset[str]:
        return frozenset(e.id for e in self.edges)

    def table_names(self) -> list[str]:
        """Sorted distinct names of the table nodes in this context."""
        return sorted({n.name for n in self.nodes if n.is_table})


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    content: str
    model: str
    tokens_used: int = 0


@dataclass
class GeneratedSQL:
    """SQL produced for a question along with the prompt that produced it."""

    sql: str
    prompt: str
    model: str = ""


@dataclass
class AskResult:
    """Final result of answering a question against the schema graph."""

    success: bool
    question: str
    sql: Optional[str]
    context_tables: list[str]
    schema_context: str
    relationships: str
    prompt_used: str
    partial: bool = False
    warnings: list[str] = field(default_factory=list)
    message: str = ""
