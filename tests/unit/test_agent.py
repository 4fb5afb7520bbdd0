"""
Unit Tests for GraphRAGAgent
============================

Tests for question answering over the retrieved schema subgraph.
"""

import pytest

from graphrag_text2sql.agent import GraphRAGAgent, SQLGenerator
from graphrag_text2sql.errors import RetrievalError
from graphrag_text2sql.llm.mock import MockLLM
from graphrag_text2sql.models import GraphContext
from graphrag_text2sql.retrieval.retriever import SubgraphRetriever
from graphrag_text2sql.store.memory import InMemoryGraphStore


class TestSQLGenerator:
    """Prompt construction and SQL extraction."""

    def test_prompt_contains_rendered_subgraph(
        self, shop_retriever: SubgraphRetriever, mock_llm_sql: MockLLM
    ) -> None:
        ctx = shop_retriever.retrieve_subgraph("orders per customer")
        prompt = SQLGenerator(mock_llm_sql).build_prompt("orders per customer", ctx)

        assert "TABLE shop.orders (columns: customer_id, order_date, order_id, total)" in prompt
        assert "fk: c:orders:customer_id -> c:customers:customer_id" in prompt
        assert prompt.endswith("Question: orders per customer")

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("SELECT 1", "SELECT 1"),
            ("```sql\nSELECT 1\n```", "SELECT 1"),
            ("```\nSELECT 1\n```", "SELECT 1"),
            ("  SELECT 1  \n", "SELECT 1"),
        ],
    )
    def test_extract_sql(self, output: str, expected: str) -> None:
        assert SQLGenerator._extract_sql(output) == expected

    def test_generate_records_model_and_prompt(self, mock_llm_sql: MockLLM) -> None:
        generated = SQLGenerator(mock_llm_sql).generate("how many orders", GraphContext())
        assert generated.sql == "SELECT COUNT(*) FROM shop.orders"
        assert generated.model == "mock-llm-v1"
        assert "Question: how many orders" in generated.prompt


class TestAgentAsk:
    """Full question -> subgraph -> SQL flow."""

    def test_successful_question(self, shop_agent: GraphRAGAgent) -> None:
        result = shop_agent.ask("How many orders")

        assert result.success is True
        assert result.sql == "SELECT COUNT(*) FROM shop.orders"
        assert "shop.orders" in result.context_tables
        assert "TABLE shop.orders" in result.schema_context
        assert result.prompt_used
        assert result.warnings == []

    def test_no_schema_found_skips_llm(self, shop_agent: GraphRAGAgent, mock_llm_sql: MockLLM) -> None:
        result = shop_agent.ask("warehouse stock levels")

        assert result.success is False
        assert result.sql is None
        assert result.message == "No relevant schema found."
        assert result.prompt_used == ""
        assert mock_llm_sql.prompts == []

    def test_empty_llm_output_is_failure(self, shop_retriever: SubgraphRetriever) -> None:
        agent = GraphRAGAgent(shop_retriever, SQLGenerator(MockLLM(default="")))
        result = agent.ask("total per customer")

        assert result.success is False
        assert result.sql is None
        assert result.message == "SQL generation failed."
        assert result.prompt_used

    def test_partial_subgraph_adds_warning(self, flaky_store, mock_llm_sql: MockLLM) -> None:
        flaky_store.fail_edge_call = 2
        agent = GraphRAGAgent(SubgraphRetriever(flaky_store), SQLGenerator(mock_llm_sql))

        result = agent.ask("how many orders", max_hops=3)

        assert result.partial is True
        assert result.success is True
        assert result.warnings == ["edge query failed"]

    def test_retrieval_error_propagates(self, flaky_store, mock_llm_sql: MockLLM) -> None:
        flaky_store.fail_seed_query = True
        agent = GraphRAGAgent(SubgraphRetriever(flaky_store), SQLGenerator(mock_llm_sql))

        with pytest.raises(RetrievalError):
            agent.ask("how many orders")

    def test_answer_reuses_report(self, shop_agent: GraphRAGAgent) -> None:
        report = shop_agent.retriever.retrieve("list customers")
        result = shop_agent.answer("list customers", report)

        assert result.sql == "SELECT name, email FROM shop.customers"
        assert result.context_tables == report.context.table_names()

    def test_empty_store(self, mock_llm_sql: MockLLM) -> None:
        agent = GraphRAGAgent(SubgraphRetriever(InMemoryGraphStore()), SQLGenerator(mock_llm_sql))
        result = agent.ask("how many orders")
        assert result.success is False
        assert result.context_tables == []
