"""
FastAPI Application
===================

Main FastAPI application for the schema-graph text-to-SQL service.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.middleware.telemetry import TelemetryMiddleware
from api.routes import ask_router, health_router, seed_router
from api.schemas import ErrorResponse
from graphrag_text2sql.agent import GraphRAGAgent, SQLGenerator
from graphrag_text2sql.config import AppConfig
from graphrag_text2sql.llm import LLMInterface, MockLLM, OpenAILLM
from graphrag_text2sql.retrieval import LLMKeywordAugmenter, NoOpAugmenter, SubgraphRetriever
from graphrag_text2sql.seeder import SAMPLE_SCHEMA, SchemaSeeder
from graphrag_text2sql.store import GraphStore, InMemoryGraphStore
from observability.logging_config import get_logger, setup_logging
from observability.metrics import metrics_endpoint, setup_metrics
from observability.tracing import setup_tracing

logger = get_logger(__name__)

DEMO_RESPONSES = {
    "revenue": ["SELECT SUM(total_amount) FROM ecommerce.orders"],
    "orders": [
        "SELECT c.full_name, COUNT(o.order_id) FROM ecommerce.customers c "
        "JOIN ecommerce.orders o ON o.customer_id = c.customer_id GROUP BY c.full_name"
    ],
    "products": ["SELECT name, price FROM ecommerce.products"],
    "customers": ["SELECT customer_id, email, full_name FROM ecommerce.customers"],
}


def create_store(config: AppConfig) -> GraphStore:
    """Create the configured graph store backend."""
    if config.graph_backend == "neo4j":
        from graphrag_text2sql.store.neo4j_store import Neo4jGraphStore

        store = Neo4jGraphStore(config.neo4j, query_timeout=config.retrieval.timeout_seconds)
        store.ensure_constraints()
        return store
    return InMemoryGraphStore()


def create_llm() -> LLMInterface:
    """OpenAI when a key is configured, otherwise canned demo responses."""
    if os.getenv("OPENAI_API_KEY"):
        return OpenAILLM()
    logger.warning("openai_not_configured", fallback="mock-llm")
    return MockLLM(responses=DEMO_RESPONSES)


def create_agent(store: GraphStore, llm: LLMInterface, config: AppConfig) -> GraphRAGAgent:
    """Wire retrieval and SQL generation around a store and an LLM."""
    augmenter = LLMKeywordAugmenter(llm) if isinstance(llm, OpenAILLM) else NoOpAugmenter()
    retriever = SubgraphRetriever(store, augmenter=augmenter, config=config.retrieval)
    return GraphRAGAgent(retriever, SQLGenerator(llm))


def create_app(
    config: AppConfig | None = None,
    store: GraphStore | None = None,
    llm: LLMInterface | None = None,
    enable_tracing: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration (default: from environment)
        store: Graph store to serve from; built from ``config`` when omitted
        llm: LLM for SQL generation; built from the environment when omitted
        enable_tracing: Install the OpenTelemetry provider and instrumentation
    """
    config = config or AppConfig.from_env()
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        logger.info("starting_service", version=__version__, backend=config.graph_backend)

        app.state.store = store if store is not None else create_store(config)
        if config.seed_on_startup:
            SchemaSeeder(app.state.store).seed(SAMPLE_SCHEMA)
        app.state.agent = create_agent(app.state.store, llm if llm is not None else create_llm(), config)

        yield

        logger.info("shutting_down_service")
        if store is None:
            app.state.store.close()

    app = FastAPI(
        title="Graph RAG Text-to-SQL API",
        description=(
            "Retrieves the relevant subgraph of a relational schema graph for a "
            "natural language question and generates SQL grounded in it."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(ask_router)
    app.include_router(seed_router)

    setup_metrics(app, version=__version__, environment=os.getenv("ENVIRONMENT", "development"))
    app.add_route("/metrics", metrics_endpoint)
    if enable_tracing:
        setup_tracing(app, version=__version__)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        request_id = getattr(request.state, "request_id", None)
        logger.exception("unhandled_exception", error=str(exc))
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="InternalServerError",
                message="An unexpected error occurred",
                request_id=request_id,
            ).model_dump(),
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
