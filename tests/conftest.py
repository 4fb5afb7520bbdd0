"""
Pytest Fixtures
===============

Shared fixtures for schema graph retrieval tests.
"""

from typing import Collection, Iterator

import pytest

from graphrag_text2sql.agent import GraphRAGAgent, SQLGenerator
from graphrag_text2sql.config import RetrievalConfig
from graphrag_text2sql.errors import StoreError, StoreUnavailableError
from graphrag_text2sql.llm.mock import MockLLM
from graphrag_text2sql.models import EdgeLabel, GraphEdge, GraphNode, NodeLabel
from graphrag_text2sql.retrieval.retriever import SubgraphRetriever
from graphrag_text2sql.seeder import (
    SAMPLE_SCHEMA,
    ForeignKeyDef,
    SchemaDefinition,
    SchemaSeeder,
    TableDef,
)
from graphrag_text2sql.store.memory import InMemoryGraphStore

SHOP_SCHEMA = SchemaDefinition(
    schema="shop",
    tables=[
        TableDef("customers", ["customer_id", "name", "email"]),
        TableDef("orders", ["order_id", "customer_id", "order_date", "total"]),
    ],
    foreign_keys=[ForeignKeyDef("orders", "customer_id", "customers", "customer_id")],
)


class FlakyGraphStore(InMemoryGraphStore):
    """
    In-memory store that fails on demand.

    ``fail_seed_query`` makes both seed queries raise. ``fail_edge_call``
    makes the n-th (1-based) edge query raise ``error``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_seed_query = False
        self.fail_edge_call: int | None = None
        self.error: type[StoreError] = StoreUnavailableError

    def query_nodes_by_name_contains_any(
        self,
        tokens: Collection[str],
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        if self.fail_seed_query:
            raise self.error("seed query failed")
        return super().query_nodes_by_name_contains_any(tokens, labels, limit)

    def query_all_by_label(
        self,
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        if self.fail_seed_query:
            raise self.error("seed query failed")
        return super().query_all_by_label(labels, limit)

    def query_edges_by_endpoint_in(
        self,
        ids: Collection[str],
        labels: Collection[EdgeLabel],
        timeout: float | None = None,
    ) -> list[GraphEdge]:
        edges = super().query_edges_by_endpoint_in(ids, labels, timeout)
        if self.call_counts["query_edges_by_endpoint_in"] == self.fail_edge_call:
            raise self.error("edge query failed")
        return edges


@pytest.fixture
def shop_schema() -> SchemaDefinition:
    """Two tables, customers and orders, joined by orders.customer_id."""
    return SHOP_SCHEMA


@pytest.fixture
def shop_store() -> InMemoryGraphStore:
    """Store seeded with the customers/orders schema."""
    store = InMemoryGraphStore()
    SchemaSeeder(store).seed(SHOP_SCHEMA)
    store.call_counts.clear()
    return store


@pytest.fixture
def sample_store() -> InMemoryGraphStore:
    """Store seeded with the e-commerce sample schema."""
    store = InMemoryGraphStore()
    SchemaSeeder(store).seed(SAMPLE_SCHEMA)
    store.call_counts.clear()
    return store


@pytest.fixture
def flaky_store() -> FlakyGraphStore:
    """Customers/orders store whose failures are switched on per test."""
    store = FlakyGraphStore()
    SchemaSeeder(store).seed(SHOP_SCHEMA)
    return store


@pytest.fixture
def shop_retriever(shop_store: InMemoryGraphStore) -> SubgraphRetriever:
    return SubgraphRetriever(shop_store, config=RetrievalConfig(top_k=30, max_hops=1))


@pytest.fixture
def mock_llm_sql() -> MockLLM:
    """Mock LLM answering order questions with fenced SQL."""
    return MockLLM(
        responses={
            "question: how many orders": [
                "```sql\nSELECT COUNT(*) FROM shop.orders\n```",
            ],
            "question: list customers": [
                "SELECT name, email FROM shop.customers",
            ],
        }
    )


@pytest.fixture
def shop_agent(shop_retriever: SubgraphRetriever, mock_llm_sql: MockLLM) -> GraphRAGAgent:
    return GraphRAGAgent(shop_retriever, SQLGenerator(mock_llm_sql))
