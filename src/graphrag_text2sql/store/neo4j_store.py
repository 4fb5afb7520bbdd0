"""
Neo4j Graph Store
=================

GraphStore backed by Neo4j (or any Bolt-compatible database such as
Memgraph) through the official ``neo4j`` driver.

Schema nodes are stored as ``(:Table)`` and ``(:Column)`` with the
properties ``id``, ``name``, ``table`` and ``pk``. Edges are
``[:HAS_COLUMN]`` and ``[:FK]`` relationships carrying ``id`` and ``pk``.
"""

from contextlib import contextmanager
from typing import Any, Collection, Generator, Iterable, Iterator

import structlog
from neo4j import Driver, GraphDatabase, Query, Session
from neo4j.exceptions import DriverError, Neo4jError, ServiceUnavailable, SessionExpired

from graphrag_text2sql.config import Neo4jConfig
from graphrag_text2sql.errors import StoreTimeoutError, StoreUnavailableError
from graphrag_text2sql.models import EdgeLabel, GraphEdge, GraphNode, NodeLabel
from graphrag_text2sql.store.base import GraphStore

logger = structlog.get_logger(__name__)

NODE_LABELS: dict[NodeLabel, str] = {
    NodeLabel.TABLE: "Table",
    NodeLabel.COLUMN: "Column",
}
EDGE_TYPES: dict[EdgeLabel, str] = {
    EdgeLabel.HAS_COLUMN: "HAS_COLUMN",
    EdgeLabel.FK: "FK",
}
_NODE_LABELS_REVERSE = {v: k for k, v in NODE_LABELS.items()}
_EDGE_TYPES_REVERSE = {v: k for k, v in EDGE_TYPES.items()}

_NODE_RETURN = """
RETURN n.id AS id, labels(n) AS labels, n.name AS name, n.table AS table, n.pk AS pk
"""

NODES_BY_NAME_QUERY = (
    """
MATCH (n)
WHERE any(l IN labels(n) WHERE l IN $labels)
  AND any(t IN $tokens WHERE toLower(n.name) CONTAINS t)
"""
    + _NODE_RETURN
    + "ORDER BY n.id SKIP $skip LIMIT $limit"
)

NODES_BY_LABEL_QUERY = (
    """
MATCH (n)
WHERE any(l IN labels(n) WHERE l IN $labels)
"""
    + _NODE_RETURN
    + "ORDER BY n.id SKIP $skip LIMIT $limit"
)

NODES_BY_ID_QUERY = (
    """
MATCH (n)
WHERE n.id IN $ids
"""
    + _NODE_RETURN
    + "ORDER BY n.id"
)

EDGES_BY_ENDPOINT_QUERY = """
MATCH (a)-[r]->(b)
WHERE type(r) IN $types AND (a.id IN $ids OR b.id IN $ids)
RETURN r.id AS id, type(r) AS type, a.id AS source, b.id AS target, r.pk AS pk
ORDER BY r.id
"""


class Neo4jGraphStore(GraphStore):
    """Neo4j implementation of the graph store."""

    def __init__(
        self,
        neo4j_config: Neo4jConfig | None = None,
        driver: Driver | None = None,
        query_timeout: float | None = None,
    ) -> None:
        self._config = neo4j_config or Neo4jConfig()
        self._driver = driver
        self._query_timeout = query_timeout

    @property
    def driver(self) -> Driver:
        """Get or create the Neo4j driver."""
        if self._driver is None:
            self._driver = GraphDatabase.driver(
                self._config.uri,
                auth=(self._config.user, self._config.password),
            )
            logger.info("neo4j_connected", uri=self._config.uri)
        return self._driver

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
            self._driver = None
            logger.info("neo4j_closed")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        session = self.driver.session(database=self._config.database)
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def _translate_errors(self) -> Generator[None, None, None]:
        """Re-raise driver failures as store errors."""
        try:
            yield
        except (ServiceUnavailable, SessionExpired) as e:
            raise StoreUnavailableError(f"Neo4j unavailable: {e}") from e
        except Neo4jError as e:
            if "TimedOut" in (e.code or ""):
                raise StoreTimeoutError(f"Neo4j query timed out: {e}") from e
            raise StoreUnavailableError(f"Neo4j query failed: {e}") from e
        except DriverError as e:
            raise StoreUnavailableError(f"Neo4j driver error: {e}") from e

    def _effective_timeout(self, timeout: float | None) -> float | None:
        """The tighter of the store-wide query timeout and a per-call one."""
        if timeout is None:
            return self._query_timeout
        if timeout <= 0:
            raise StoreTimeoutError("Neo4j query not started: no time left")
        if self._query_timeout is None:
            return timeout
        return min(timeout, self._query_timeout)

    def _run(self, text: str, timeout: float | None = None, **params: Any) -> list[dict[str, Any]]:
        """Run a read query and translate driver failures into store errors."""
        query = Query(text, timeout=self._effective_timeout(timeout))
        with self._translate_errors(), self.session() as session:
            result = session.run(query, params)
            return [record.data() for record in result]

    @staticmethod
    def _to_node(row: dict[str, Any]) -> GraphNode | None:
        label = next(
            (_NODE_LABELS_REVERSE[l] for l in row.get("labels") or [] if l in _NODE_LABELS_REVERSE),
            None,
        )
        if label is None or row.get("id") is None:
            logger.warning("neo4j_node_skipped", row=row)
            return None
        return GraphNode(
            id=str(row["id"]),
            label=label,
            name=row.get("name") or "",
            table=row.get("table"),
            pk=row.get("pk") or "",
        )

    @staticmethod
    def _to_edge(row: dict[str, Any]) -> GraphEdge | None:
        label = _EDGE_TYPES_REVERSE.get(row.get("type"))
        if label is None or row.get("id") is None:
            logger.warning("neo4j_edge_skipped", row=row)
            return None
        return GraphEdge(
            id=str(row["id"]),
            label=label,
            source=str(row["source"]),
            target=str(row["target"]),
            pk=row.get("pk") or "",
        )

    def _paged_nodes(self, text: str, limit: int, **params: Any) -> Iterator[list[GraphNode]]:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        skip = 0
        while True:
            rows = self._run(text, skip=skip, limit=limit, **params)
            page = [n for n in map(self._to_node, rows) if n is not None]
            if page:
                yield page
            if len(rows) < limit:
                return
            skip += limit

    def query_nodes_by_name_contains_any(
        self,
        tokens: Collection[str],
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        return self._paged_nodes(
            NODES_BY_NAME_QUERY,
            limit,
            tokens=[t.lower() for t in tokens],
            labels=[NODE_LABELS[l] for l in labels],
        )

    def query_all_by_label(
        self,
        labels: Collection[NodeLabel],
        limit: int,
    ) -> Iterator[list[GraphNode]]:
        return self._paged_nodes(
            NODES_BY_LABEL_QUERY,
            limit,
            labels=[NODE_LABELS[l] for l in labels],
        )

    def query_nodes_by_id_in(
        self,
        ids: Collection[str],
        timeout: float | None = None,
    ) -> list[GraphNode]:
        rows = self._run(NODES_BY_ID_QUERY, timeout=timeout, ids=list(ids))
        return [n for n in map(self._to_node, rows) if n is not None]

    def query_edges_by_endpoint_in(
        self,
        ids: Collection[str],
        labels: Collection[EdgeLabel],
        timeout: float | None = None,
    ) -> list[GraphEdge]:
        rows = self._run(
            EDGES_BY_ENDPOINT_QUERY,
            timeout=timeout,
            ids=list(ids),
            types=[EDGE_TYPES[l] for l in labels],
        )
        return [e for e in map(self._to_edge, rows) if e is not None]

    def ensure_constraints(self) -> None:
        """Create uniqueness constraints on node ids."""
        with self._translate_errors(), self.session() as session:
            for neo_label in NODE_LABELS.values():
                session.run(
                    f"CREATE CONSTRAINT {neo_label.lower()}_id IF NOT EXISTS "
                    f"FOR (n:{neo_label}) REQUIRE n.id IS UNIQUE"
                )

    def upsert_nodes(self, nodes: Iterable[GraphNode]) -> int:
        by_label: dict[NodeLabel, list[dict[str, Any]]] = {}
        for n in nodes:
            by_label.setdefault(n.label, []).append(
                {"id": n.id, "name": n.name, "table": n.table, "pk": n.pk}
            )

        written = 0
        with self._translate_errors(), self.session() as session:
            for label, rows in by_label.items():
                session.execute_write(
                    lambda tx, q=(
                        f"UNWIND $rows AS row "
                        f"MERGE (n:{NODE_LABELS[label]} {{id: row.id}}) "
                        f"SET n.name = row.name, n.table = row.table, n.pk = row.pk"
                    ), r=rows: tx.run(q, rows=r).consume()
                )
                written += len(rows)
        return written

    def upsert_edges(self, edges: Iterable[GraphEdge]) -> int:
        by_label: dict[EdgeLabel, list[dict[str, Any]]] = {}
        for e in edges:
            by_label.setdefault(e.label, []).append(
                {"id": e.id, "source": e.source, "target": e.target, "pk": e.pk}
            )

        written = 0
        with self._translate_errors(), self.session() as session:
            for label, rows in by_label.items():
                session.execute_write(
                    lambda tx, q=(
                        f"UNWIND $rows AS row "
                        f"MATCH (a {{id: row.source}}), (b {{id: row.target}}) "
                        f"MERGE (a)-[r:{EDGE_TYPES[label]} {{id: row.id}}]->(b) "
                        f"SET r.pk = row.pk"
                    ), r=rows: tx.run(q, rows=r).consume()
                )
                written += len(rows)
        return written

    def ping(self) -> bool:
        try:
            self.driver.verify_connectivity()
            return True
        except (DriverError, Neo4jError) as e:
            logger.warning("neo4j_ping_failed", error=str(e))
            return False

    def __enter__(self) -> "Neo4jGraphStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
