"""
Question Routes
===============

Subgraph retrieval and SQL generation endpoints.
"""

import time
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request

from api.schemas import (
    AskRequest,
    AskResponse,
    ErrorResponse,
    FailureResponse,
    SubgraphRequest,
    SubgraphResponse,
)
from graphrag_text2sql.agent import GraphRAGAgent
from graphrag_text2sql.errors import RetrievalError
from graphrag_text2sql.models import RetrievalErrorKind
from graphrag_text2sql.retrieval.render import render_relationships, render_schema
from graphrag_text2sql.retrieval.retriever import RetrievalReport, SubgraphRetriever
from observability.logging_config import get_logger
from observability.metrics import track_retrieval_metrics, track_sql_generation

router = APIRouter(prefix="/api/v1", tags=["Retrieval"])
logger = get_logger(__name__)

RETRIEVAL_ERROR_RESPONSES = {
    503: {"model": ErrorResponse, "description": "Schema graph store unavailable"},
    504: {"model": ErrorResponse, "description": "Schema graph store timed out"},
}


def get_agent(request: Request) -> GraphRAGAgent:
    """Dependency to get the configured agent from app state."""
    return request.app.state.agent


def get_retriever(request: Request) -> SubgraphRetriever:
    return request.app.state.agent.retriever


def get_request_id(request: Request) -> str:
    """Request ID set by the telemetry middleware, or a fresh one."""
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def _retrieval_http_error(e: RetrievalError, request_id: str) -> HTTPException:
    status_code = 504 if e.kind == RetrievalErrorKind.TIMEOUT else 503
    return HTTPException(
        status_code=status_code,
        detail={
            "error": "RetrievalError",
            "kind": e.kind.value,
            "message": e.message,
            "request_id": request_id,
        },
    )


def _track(report: RetrievalReport) -> None:
    ctx = report.context
    track_retrieval_metrics(
        outcome=report.outcome,
        duration_seconds=report.duration_seconds,
        hops=ctx.hops_completed,
        nodes=len(ctx.nodes),
        edges=len(ctx.edges),
        augmentation_failed=report.augmentation_error is not None,
    )


@router.post(
    "/subgraph",
    response_model=SubgraphResponse,
    responses=RETRIEVAL_ERROR_RESPONSES,
    summary="Retrieve the schema subgraph for a question",
    description="Runs keyword seeding and neighbor expansion and returns the subgraph with its rendered text",
)
def retrieve_subgraph(
    body: SubgraphRequest,
    retriever: Annotated[SubgraphRetriever, Depends(get_retriever)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> SubgraphResponse:
    start_time = time.perf_counter()
    try:
        report = retriever.retrieve(body.question, body.top_k, body.max_hops)
    except RetrievalError as e:
        track_retrieval_metrics(outcome="error", duration_seconds=time.perf_counter() - start_time)
        logger.error("subgraph_request_failed", kind=e.kind.value, error=e.message)
        raise _retrieval_http_error(e, request_id)

    _track(report)
    ctx = report.context
    nodes, edges = SubgraphResponse.nodes_and_edges(ctx)
    failure = None
    if ctx.failure is not None:
        failure = FailureResponse(
            kind=ctx.failure.kind.value,
            hop=ctx.failure.hop,
            message=ctx.failure.message,
        )

    return SubgraphResponse(
        question=body.question,
        tokens=report.tokens,
        seed_count=report.seed_count,
        hops_completed=ctx.hops_completed,
        nodes=nodes,
        edges=edges,
        schema_context=render_schema(ctx),
        relationships=render_relationships(ctx),
        partial=ctx.partial,
        failure=failure,
        augmentation_error=report.augmentation_error,
        request_id=request_id,
        processing_time_ms=(time.perf_counter() - start_time) * 1000,
    )


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={
        400: {"model": ErrorResponse, "description": "SQL generation failed"},
        **RETRIEVAL_ERROR_RESPONSES,
    },
    summary="Generate SQL grounded in the retrieved schema subgraph",
    description="Retrieves the relevant schema subgraph and asks the LLM for SQL over it",
)
def ask(
    body: AskRequest,
    agent: Annotated[GraphRAGAgent, Depends(get_agent)],
    request_id: Annotated[str, Depends(get_request_id)],
) -> AskResponse:
    """
    Answer a natural language question with SQL.

    The endpoint:
    1. Retrieves the schema subgraph for the question
    2. Renders it into schema and relationship text
    3. Generates SQL with the configured LLM

    An empty subgraph is reported as an unsuccessful result, not an error.
    """
    start_time = time.perf_counter()
    try:
        report = agent.retriever.retrieve(body.question, body.top_k, body.max_hops)
    except RetrievalError as e:
        track_retrieval_metrics(outcome="error", duration_seconds=time.perf_counter() - start_time)
        logger.error("ask_request_failed", kind=e.kind.value, error=e.message)
        raise _retrieval_http_error(e, request_id)

    _track(report)
    result = agent.answer(body.question, report)

    if result.prompt_used:
        track_sql_generation(result.success)
        if not result.success:
            raise HTTPException(
                status_code=400,
                detail={
                    "error": "SQLGenerationError",
                    "message": result.message,
                    "request_id": request_id,
                },
            )

    return AskResponse(
        success=result.success,
        sql=result.sql,
        question=result.question,
        context_tables=result.context_tables,
        schema_context=result.schema_context,
        relationships=result.relationships,
        prompt_used=result.prompt_used if body.include_prompt else None,
        partial=result.partial,
        warnings=result.warnings,
        message=result.message,
        request_id=request_id,
        processing_time_ms=(time.perf_counter() - start_time) * 1000,
    )
