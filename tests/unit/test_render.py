"""
Unit Tests for Schema Rendering
===============================
"""

from graphrag_text2sql.models import EdgeLabel, GraphContext, GraphEdge, GraphNode, NodeLabel
from graphrag_text2sql.retrieval.render import render_relationships, render_schema

ORDERS = GraphNode("t:orders", NodeLabel.TABLE, "shop.orders")
CUSTOMERS = GraphNode("t:customers", NodeLabel.TABLE, "shop.customers")
TOTAL = GraphNode("c:orders:total", NodeLabel.COLUMN, "total", "shop.orders")
ORDER_ID = GraphNode("c:orders:order_id", NodeLabel.COLUMN, "order_id", "shop.orders")
ORPHAN = GraphNode("c:x:orphan", NodeLabel.COLUMN, "orphan", None)


class TestRenderSchema:
    """Table listing shown to the SQL generator."""

    def test_tables_and_columns_sorted(self) -> None:
        ctx = GraphContext(nodes=(TOTAL, ORDERS, CUSTOMERS, ORDER_ID))
        assert render_schema(ctx) == (
            "TABLE shop.customers (columns: )\n"
            "TABLE shop.orders (columns: order_id, total)\n"
        )

    def test_columns_without_table_are_not_attached(self) -> None:
        ctx = GraphContext(nodes=(ORDERS, ORPHAN))
        assert render_schema(ctx) == "TABLE shop.orders (columns: )\n"

    def test_columns_without_table_grouped_under_empty_name(self) -> None:
        unnamed = GraphNode("t:", NodeLabel.TABLE, "")
        stray = GraphNode("c:y:stray", NodeLabel.COLUMN, "stray", None)
        ctx = GraphContext(nodes=(ORDERS, unnamed, ORPHAN, stray, TOTAL))
        assert render_schema(ctx) == (
            "TABLE  (columns: orphan, stray)\n"
            "TABLE shop.orders (columns: total)\n"
        )

    def test_columns_without_their_table_node_are_omitted(self) -> None:
        ctx = GraphContext(nodes=(TOTAL,))
        assert render_schema(ctx) == ""

    def test_empty_context(self) -> None:
        assert render_schema(GraphContext()) == ""

    def test_order_independent(self) -> None:
        a = GraphContext(nodes=(ORDERS, TOTAL, ORDER_ID, CUSTOMERS))
        b = GraphContext(nodes=(ORDER_ID, CUSTOMERS, TOTAL, ORDERS))
        assert render_schema(a) == render_schema(b)


class TestRenderRelationships:
    def test_grouped_by_label_in_encounter_order(self) -> None:
        fk1 = GraphEdge("e:fk:1", EdgeLabel.FK, "c:orders:customer_id", "c:customers:customer_id")
        hc = GraphEdge("e:hascol:1", EdgeLabel.HAS_COLUMN, "t:orders", "c:orders:total")
        fk2 = GraphEdge("e:fk:2", EdgeLabel.FK, "c:items:order_id", "c:orders:order_id")

        text = render_relationships(GraphContext(edges=(fk1, hc, fk2)))

        assert text == (
            "fk: c:orders:customer_id -> c:customers:customer_id\n"
            "fk: c:items:order_id -> c:orders:order_id\n"
            "has_column: t:orders -> c:orders:total\n"
        )

    def test_empty_context(self) -> None:
        assert render_relationships(GraphContext()) == ""
