"""
API Schemas
===========

Pydantic models for API request/response validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from graphrag_text2sql.models import GraphContext


class RetrievalParams(BaseModel):
    """Retrieval knobs shared by the question endpoints."""

    question: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Natural language question",
        examples=["How many orders did each customer place last month?"],
    )
    top_k: int | None = Field(
        default=None,
        ge=1,
        le=500,
        description="Maximum number of seed nodes (default: GRAPH_TOP_K or 30)",
    )
    max_hops: int | None = Field(
        default=None,
        ge=0,
        le=10,
        description="Neighbor expansion rounds (default: GRAPH_MAX_HOPS or 2)",
    )


class AskRequest(RetrievalParams):
    """Request body for SQL generation."""

    include_prompt: bool = Field(
        default=False,
        description="Include the rendered prompt in the response",
    )


class SubgraphRequest(RetrievalParams):
    """Request body for subgraph retrieval without SQL generation."""


class FailureResponse(BaseModel):
    """Why expansion stopped early."""

    kind: str = Field(..., description="store_unavailable, timeout or cancelled")
    hop: int = Field(..., description="Hop at which expansion stopped")
    message: str


class AskResponse(BaseModel):
    """Response body for SQL generation."""

    success: bool = Field(..., description="Whether SQL was generated")
    sql: str | None = Field(None, description="Generated SQL (if successful)")
    question: str
    context_tables: list[str] = Field(default_factory=list, description="Tables shown to the LLM")
    schema_context: str = Field("", description="Rendered table/column listing")
    relationships: str = Field("", description="Rendered relationship listing")
    prompt_used: str | None = Field(None, description="Prompt sent to the LLM (if requested)")
    partial: bool = Field(False, description="Whether the subgraph is a best-effort partial result")
    warnings: list[str] = Field(default_factory=list)
    message: str
    request_id: str
    processing_time_ms: float


class NodeResponse(BaseModel):
    id: str
    label: str
    name: str
    table: str | None = None


class EdgeResponse(BaseModel):
    id: str
    label: str
    source: str
    target: str


class SubgraphResponse(BaseModel):
    """Retrieved subgraph with its rendered text."""

    question: str
    tokens: list[str]
    seed_count: int
    hops_completed: int
    nodes: list[NodeResponse]
    edges: list[EdgeResponse]
    schema_context: str
    relationships: str
    partial: bool = False
    failure: FailureResponse | None = None
    augmentation_error: str | None = None
    request_id: str
    processing_time_ms: float

    @staticmethod
    def nodes_and_edges(ctx: GraphContext) -> tuple[list[NodeResponse], list[EdgeResponse]]:
        nodes = [
            NodeResponse(id=n.id, label=n.label.value, name=n.name, table=n.table)
            for n in ctx.nodes
        ]
        edges = [
            EdgeResponse(id=e.id, label=e.label.value, source=e.source, target=e.target)
            for e in ctx.edges
        ]
        return nodes, edges


class TableDefinition(BaseModel):
    name: str = Field(..., min_length=1)
    columns: list[str] = Field(default_factory=list)


class ForeignKeyDefinition(BaseModel):
    from_table: str
    from_column: str
    to_table: str
    to_column: str


class SchemaDefinitionRequest(BaseModel):
    """Relational schema to load into the graph."""

    schema_name: str = Field(..., min_length=1, alias="schema")
    pk: str = ""
    tables: list[TableDefinition]
    foreign_keys: list[ForeignKeyDefinition] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class SeedRequest(BaseModel):
    """Request body for seeding. Omitting ``definition`` loads the sample schema."""

    definition: SchemaDefinitionRequest | None = None


class SeedResponse(BaseModel):
    schema_name: str
    tables: int
    columns: int
    has_column_edges: int
    fk_edges: int


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(..., description="Overall health status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual component health checks",
    )


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(..., description="Whether the service is ready to handle requests")
    checks: dict[str, bool] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    request_id: str | None = Field(None, description="Request ID if available")
    details: dict[str, Any] | None = Field(None, description="Additional error details")
