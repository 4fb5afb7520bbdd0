"""
Unit Tests for Neighbor Expansion
=================================

Hop semantics, early termination and partial results on failure.
"""

import threading

import pytest

from graphrag_text2sql.errors import StoreTimeoutError
from graphrag_text2sql.models import EdgeLabel, GraphNode, NodeLabel, RetrievalErrorKind
from graphrag_text2sql.retrieval.deadline import Deadline
from graphrag_text2sql.retrieval.expander import NeighborExpander
from graphrag_text2sql.retrieval.seeds import SeedSelector
from graphrag_text2sql.seeder import SchemaSeeder
from graphrag_text2sql.store.memory import InMemoryGraphStore


def _seeds(store: InMemoryGraphStore, *tokens: str, top_k: int = 30) -> list[GraphNode]:
    seeds = SeedSelector(store).select_seeds(set(tokens), top_k)
    store.call_counts.clear()
    return seeds


class TestExpansionHops:
    """Breadth-first growth over has_column and fk edges."""

    def test_zero_hops_returns_seeds_only(self, shop_store: InMemoryGraphStore) -> None:
        seeds = _seeds(shop_store, "order")
        result = NeighborExpander(shop_store).expand(seeds, max_hops=0)

        assert result.nodes == seeds
        assert result.edges == []
        assert result.hops_completed == 0
        assert sum(shop_store.call_counts.values()) == 0

    def test_one_hop_adds_table_columns(self, shop_store: InMemoryGraphStore) -> None:
        seeds = _seeds(shop_store, "order")
        result = NeighborExpander(shop_store).expand(seeds, max_hops=1)

        ids = {n.id for n in result.nodes}
        assert {"c:orders:customer_id", "c:orders:total"} <= ids
        assert "t:customers" not in ids
        assert {e.label for e in result.edges} == {EdgeLabel.HAS_COLUMN}
        assert result.frontier_sizes == [2]

    def test_fk_followed_from_referencing_column(self, shop_store: InMemoryGraphStore) -> None:
        seeds = _seeds(shop_store, "order")
        result = NeighborExpander(shop_store).expand(seeds, max_hops=3)

        ids = {n.id for n in result.nodes}
        assert "c:customers:customer_id" in ids
        assert "t:customers" in ids
        fk_edges = [e for e in result.edges if e.label == EdgeLabel.FK]
        assert fk_edges[0].source == "c:orders:customer_id"
        assert fk_edges[0].target == "c:customers:customer_id"
        assert result.hops_completed == 3

    def test_visited_set_grows_monotonically(self, shop_store: InMemoryGraphStore) -> None:
        expander = NeighborExpander(shop_store)
        seeds = _seeds(shop_store, "total")

        previous: set[str] = set()
        for max_hops in range(6):
            result = expander.expand(seeds, max_hops)
            assert previous <= result.visited_ids
            assert result.hops_completed <= max_hops
            previous = result.visited_ids

    def test_empty_seeds_issue_no_queries(self, shop_store: InMemoryGraphStore) -> None:
        result = NeighborExpander(shop_store).expand([], max_hops=3)
        assert result.nodes == []
        assert result.hops_completed == 0
        assert sum(shop_store.call_counts.values()) == 0

    def test_negative_hops_rejected(self, shop_store: InMemoryGraphStore) -> None:
        with pytest.raises(ValueError):
            NeighborExpander(shop_store).expand([], max_hops=-1)


class TestEarlyTermination:
    """Expansion stops once a hop finds no new node."""

    def test_isolated_seed_stops_after_one_query(self) -> None:
        view = GraphNode("t:v_sales_daily", NodeLabel.TABLE, "shop.v_sales_daily")
        store = InMemoryGraphStore(nodes=[view])

        result = NeighborExpander(store).expand([view], max_hops=5)

        assert result.nodes == [view]
        assert result.hops_completed == 1
        assert store.call_counts["query_edges_by_endpoint_in"] == 1
        assert store.call_counts["query_nodes_by_id_in"] == 0

    def test_component_exhausted_before_max_hops(self, shop_store: InMemoryGraphStore) -> None:
        seeds = _seeds(shop_store, "total")
        result = NeighborExpander(shop_store).expand(seeds, max_hops=10)

        # total -> orders -> orders columns -> customers.customer_id -> customers
        # -> customers columns, then one hop that finds nothing new
        assert result.hops_completed == 6
        assert len(result.visited_ids) == shop_store.node_count
        assert shop_store.call_counts["query_edges_by_endpoint_in"] == 6
        assert shop_store.call_counts["query_nodes_by_id_in"] == 5


class TestPartialResults:
    """Failures mid-expansion keep earlier hops and record why expansion stopped."""

    def test_store_failure_keeps_previous_hops(self, flaky_store) -> None:
        seeds = _seeds(flaky_store, "order")
        flaky_store.fail_edge_call = 2

        result = NeighborExpander(flaky_store).expand(seeds, max_hops=3)

        assert result.hops_completed == 1
        assert result.failure is not None
        assert result.failure.kind == RetrievalErrorKind.STORE_UNAVAILABLE
        assert result.failure.hop == 1
        assert len(result.nodes) == 5
        assert len(result.edges) == 4

    def test_first_hop_failure_returns_seeds(self, flaky_store) -> None:
        seeds = _seeds(flaky_store, "order")
        flaky_store.fail_edge_call = 1

        result = NeighborExpander(flaky_store).expand(seeds, max_hops=2)

        assert result.nodes == seeds
        assert result.edges == []
        assert result.failure.hop == 0

    def test_store_timeout_kind(self, flaky_store) -> None:
        seeds = _seeds(flaky_store, "order")
        flaky_store.fail_edge_call = 1
        flaky_store.error = StoreTimeoutError

        result = NeighborExpander(flaky_store).expand(seeds, max_hops=2)

        assert result.failure.kind == RetrievalErrorKind.TIMEOUT

    def test_cancelled_before_first_hop(self, shop_store: InMemoryGraphStore) -> None:
        seeds = _seeds(shop_store, "order")
        cancel = threading.Event()
        cancel.set()

        result = NeighborExpander(shop_store).expand(seeds, 2, Deadline(cancel_event=cancel))

        assert result.failure.kind == RetrievalErrorKind.CANCELLED
        assert result.nodes == seeds
        assert shop_store.call_counts["query_edges_by_endpoint_in"] == 0

    def test_expired_deadline(self, shop_store: InMemoryGraphStore) -> None:
        seeds = _seeds(shop_store, "order")

        result = NeighborExpander(shop_store).expand(seeds, 2, Deadline(timeout_seconds=0))

        assert result.failure.kind == RetrievalErrorKind.TIMEOUT
        assert result.failure.hop == 0
        assert result.hops_completed == 0


class TestDeadline:
    def test_no_limit(self) -> None:
        deadline = Deadline()
        assert deadline.remaining() is None
        assert deadline.stop_reason() is None

    def test_cancel_wins_over_time(self) -> None:
        cancel = threading.Event()
        cancel.set()
        assert Deadline(0, cancel).stop_reason() == RetrievalErrorKind.CANCELLED

    def test_remaining_counts_down(self) -> None:
        remaining = Deadline(timeout_seconds=60).remaining()
        assert 0 < remaining <= 60


class TimeoutRecordingStore(InMemoryGraphStore):
    """Records the timeout each hop query was given."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.timeouts: list[float | None] = []

    def query_nodes_by_id_in(self, ids, timeout=None):
        self.timeouts.append(timeout)
        return super().query_nodes_by_id_in(ids, timeout)

    def query_edges_by_endpoint_in(self, ids, labels, timeout=None):
        self.timeouts.append(timeout)
        return super().query_edges_by_endpoint_in(ids, labels, timeout)


class TestHopQueryTimeouts:
    """Hop queries get the time left on the deadline."""

    def test_remaining_time_passed_to_store(self, shop_schema) -> None:
        store = TimeoutRecordingStore()
        SchemaSeeder(store).seed(shop_schema)
        seeds = _seeds(store, "order")

        NeighborExpander(store).expand(seeds, 2, Deadline(timeout_seconds=60))

        assert len(store.timeouts) == 4
        assert all(t is not None and 0 < t <= 60 for t in store.timeouts)
        assert store.timeouts == sorted(store.timeouts, reverse=True)

    def test_no_deadline_passes_none(self, shop_schema) -> None:
        store = TimeoutRecordingStore()
        SchemaSeeder(store).seed(shop_schema)
        seeds = _seeds(store, "order")

        NeighborExpander(store).expand(seeds, 1)

        assert store.timeouts == [None, None]
