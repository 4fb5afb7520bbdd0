"""
Schema Seeder
=============

Turns a declarative relational schema into graph nodes and edges and writes
them to a store. Identifiers are derived from names only, so seeding the
same schema twice leaves the store unchanged.

Identifier formats::

    table node       t:<table>
    column node      c:<table>:<column>
    has_column edge  e:hascol:<schema>.<table>:<column>   (table -> column)
    fk edge          e:fk:<table>:<column>-><table>:<column>
                     (referencing column -> referenced column)
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from graphrag_text2sql.models import EdgeLabel, GraphEdge, GraphNode, NodeLabel
from graphrag_text2sql.store.base import GraphStore

logger = structlog.get_logger(__name__)


def table_node_id(table: str) -> str:
    return f"t:{table}"


def column_node_id(table: str, column: str) -> str:
    return f"c:{table}:{column}"


@dataclass
class TableDef:
    """A table and its column names."""

    name: str
    columns: list[str] = field(default_factory=list)


@dataclass
class ForeignKeyDef:
    """``from_table.from_column`` references ``to_table.to_column``."""

    from_table: str
    from_column: str
    to_table: str
    to_column: str


@dataclass
class SchemaDefinition:
    """A relational schema to load into the graph."""

    schema: str
    tables: list[TableDef]
    foreign_keys: list[ForeignKeyDef] = field(default_factory=list)
    pk: str = ""

    @property
    def partition_key(self) -> str:
        return self.pk or self.schema

    def qualified(self, table: str) -> str:
        return f"{self.schema}.{table}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchemaDefinition":
        """Build from a plain mapping, e.g. a parsed JSON document.

        Tables may be given as ``{"name": ..., "columns": [...]}`` items or
        as a ``{table: [columns]}`` mapping.
        """
        raw_tables = data.get("tables", [])
        if isinstance(raw_tables, dict):
            tables = [TableDef(name, list(cols)) for name, cols in raw_tables.items()]
        else:
            tables = [TableDef(t["name"], list(t.get("columns", []))) for t in raw_tables]
        return cls(
            schema=data["schema"],
            tables=tables,
            foreign_keys=[ForeignKeyDef(**fk) for fk in data.get("foreign_keys", [])],
            pk=data.get("pk", ""),
        )

    def validate(self) -> None:
        """Raise ValueError on duplicate tables or dangling foreign keys."""
        columns: dict[str, set[str]] = {}
        for table in self.tables:
            if table.name in columns:
                raise ValueError(f"Duplicate table: '{table.name}'")
            columns[table.name] = set(table.columns)

        for fk in self.foreign_keys:
            for table, column in ((fk.from_table, fk.from_column), (fk.to_table, fk.to_column)):
                if table not in columns:
                    raise ValueError(f"Foreign key references unknown table: '{table}'")
                if column not in columns[table]:
                    raise ValueError(f"Foreign key references unknown column: '{table}.{column}'")


@dataclass
class SeedResult:
    """Counts written by a seeding run."""

    tables: int
    columns: int
    has_column_edges: int
    fk_edges: int

    @property
    def nodes(self) -> int:
        return self.tables + self.columns

    @property
    def edges(self) -> int:
        return self.has_column_edges + self.fk_edges


def build_graph(definition: SchemaDefinition) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Convert a schema definition into nodes and edges."""
    definition.validate()
    pk = definition.partition_key

    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    for table in definition.tables:
        qualified = definition.qualified(table.name)
        nodes.append(GraphNode(table_node_id(table.name), NodeLabel.TABLE, qualified, None, pk))
        for column in table.columns:
            nodes.append(
                GraphNode(column_node_id(table.name, column), NodeLabel.COLUMN, column, qualified, pk)
            )
            edges.append(
                GraphEdge(
                    id=f"e:hascol:{qualified}:{column}",
                    label=EdgeLabel.HAS_COLUMN,
                    source=table_node_id(table.name),
                    target=column_node_id(table.name, column),
                    pk=pk,
                )
            )

    for fk in definition.foreign_keys:
        edges.append(
            GraphEdge(
                id=f"e:fk:{fk.from_table}:{fk.from_column}->{fk.to_table}:{fk.to_column}",
                label=EdgeLabel.FK,
                source=column_node_id(fk.from_table, fk.from_column),
                target=column_node_id(fk.to_table, fk.to_column),
                pk=pk,
            )
        )
    return nodes, edges


class SchemaSeeder:
    """Writes schema definitions into a graph store."""

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    def seed(self, definition: SchemaDefinition) -> SeedResult:
        nodes, edges = build_graph(definition)
        self.store.upsert_nodes(nodes)
        self.store.upsert_edges(edges)

        result = SeedResult(
            tables=sum(1 for n in nodes if n.is_table),
            columns=sum(1 for n in nodes if n.is_column),
            has_column_edges=sum(1 for e in edges if e.label == EdgeLabel.HAS_COLUMN),
            fk_edges=sum(1 for e in edges if e.label == EdgeLabel.FK),
        )
        logger.info(
            "schema_seeded",
            schema=definition.schema,
            nodes=result.nodes,
            edges=result.edges,
        )
        return result


SAMPLE_SCHEMA = SchemaDefinition(
    schema="ecommerce",
    pk="ecommerce",
    tables=[
        TableDef("customers", ["customer_id", "email", "full_name", "created_at"]),
        TableDef("addresses", ["address_id", "customer_id", "address_type", "prefecture", "city"]),
        TableDef("categories", ["category_id", "name", "parent_id"]),
        TableDef(
            "products",
            ["product_id", "sku", "name", "category_id", "price", "status", "created_at"],
        ),
        TableDef("product_images", ["image_id", "product_id", "url"]),
        TableDef("warehouses", ["warehouse_id", "name"]),
        TableDef("inventory", ["product_id", "warehouse_id", "qty_on_hand"]),
        TableDef(
            "orders",
            [
                "order_id",
                "order_number",
                "customer_id",
                "status",
                "subtotal",
                "total_amount",
                "placed_at",
            ],
        ),
        TableDef(
            "order_items",
            ["order_item_id", "order_id", "product_id", "unit_price", "quantity", "line_total"],
        ),
        TableDef("payments", ["payment_id", "order_id", "method", "amount", "status", "paid_at"]),
        TableDef(
            "shipments",
            [
                "shipment_id",
                "order_id",
                "carrier",
                "tracking_number",
                "status",
                "shipped_at",
                "delivered_at",
            ],
        ),
        TableDef("reviews", ["review_id", "product_id", "customer_id", "rating", "created_at"]),
        TableDef("v_sales_daily"),
    ],
    foreign_keys=[
        ForeignKeyDef("addresses", "customer_id", "customers", "customer_id"),
        ForeignKeyDef("products", "category_id", "categories", "category_id"),
        ForeignKeyDef("product_images", "product_id", "products", "product_id"),
        ForeignKeyDef("inventory", "product_id", "products", "product_id"),
        ForeignKeyDef("inventory", "warehouse_id", "warehouses", "warehouse_id"),
        ForeignKeyDef("orders", "customer_id", "customers", "customer_id"),
        ForeignKeyDef("order_items", "order_id", "orders", "order_id"),
        ForeignKeyDef("order_items", "product_id", "products", "product_id"),
        ForeignKeyDef("payments", "order_id", "orders", "order_id"),
        ForeignKeyDef("shipments", "order_id", "orders", "order_id"),
        ForeignKeyDef("reviews", "product_id", "products", "product_id"),
        ForeignKeyDef("reviews", "customer_id", "customers", "customer_id"),
    ],
)
