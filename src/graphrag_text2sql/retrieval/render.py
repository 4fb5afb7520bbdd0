"""
Schema Rendering
================

Deterministic text views of a GraphContext for the SQL generation prompt.
"""

from collections import defaultdict

from graphrag_text2sql.models import GraphContext


def render_schema(ctx: GraphContext) -> str:
    """
    Render one ``TABLE <name> (columns: ...)`` line per table node.

    Tables are sorted by qualified name and their column names sorted
    alphabetically. A table without retrieved columns still gets a line.
    Columns missing their owning table are grouped under the empty name.
    """
    columns_by_table: dict[str, list[str]] = defaultdict(list)
    for node in ctx.nodes:
        if node.is_column:
            columns_by_table[node.table or ""].append(node.name)

    tables = sorted((n for n in ctx.nodes if n.is_table), key=lambda n: n.name)

    lines = []
    for table in tables:
        columns = ", ".join(sorted(columns_by_table.get(table.name, [])))
        lines.append(f"TABLE {table.name} (columns: {columns})\n")
    return "".join(lines)


def render_relationships(ctx: GraphContext) -> str:
    """Render one ``<label>: <from> -> <to>`` line per edge, ordered by label."""
    edges = sorted(ctx.edges, key=lambda e: e.label.value)
    return "".join(f"{e.label.value}: {e.source} -> {e.target}\n" for e in edges)
