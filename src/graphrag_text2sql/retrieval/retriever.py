"""
Subgraph Retriever
==================

Entry point tying keyword extraction, seed selection, neighbor expansion and
assembly into one retrieval call.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

import structlog
from opentelemetry import trace

from graphrag_text2sql.config import RetrievalConfig
from graphrag_text2sql.models import GraphContext
from graphrag_text2sql.retrieval.assembler import assemble
from graphrag_text2sql.retrieval.augment import KeywordAugmenter, NoOpAugmenter
from graphrag_text2sql.retrieval.deadline import Deadline
from graphrag_text2sql.retrieval.expander import NeighborExpander
from graphrag_text2sql.retrieval.keywords import extract_keywords, merge_keywords
from graphrag_text2sql.retrieval.seeds import SeedSelector
from graphrag_text2sql.store.base import GraphStore

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class RetrievalReport:
    """A GraphContext plus the bookkeeping of how it was produced."""

    context: GraphContext
    tokens: list[str]
    seed_count: int
    top_k: int
    max_hops: int
    duration_seconds: float
    augmentation_error: Optional[str] = None
    frontier_sizes: list[int] = field(default_factory=list)

    @property
    def outcome(self) -> str:
        if self.context.partial:
            return "partial"
        if self.context.is_empty:
            return "empty"
        return "ok"


class SubgraphRetriever:
    """
    Retrieves the schema subgraph relevant to a question.

    Instances hold no per-request state and may be shared across threads.

    Example:
        ```python
        store = InMemoryGraphStore()
        SchemaSeeder(store).seed(SAMPLE_SCHEMA)
        retriever = SubgraphRetriever(store)
        ctx = retriever.retrieve_subgraph("orders per customer", top_k=30, max_hops=1)
        print(render_schema(ctx))
        ```
    """

    def __init__(
        self,
        store: GraphStore,
        augmenter: KeywordAugmenter | None = None,
        config: RetrievalConfig | None = None,
    ) -> None:
        self.store = store
        self.augmenter = augmenter or NoOpAugmenter()
        self.config = config or RetrievalConfig()
        self.seed_selector = SeedSelector(store, page_size=self.config.page_size)
        self.expander = NeighborExpander(store)

    def collect_tokens(self, question: str) -> tuple[set[str], Optional[str]]:
        """Extract tokens and merge in augmenter tokens when it succeeds.

        Returns:
            Tuple of (tokens, augmentation error message or None)
        """
        own = extract_keywords(question)
        try:
            external = self.augmenter.augment(question)
        except Exception as e:
            logger.warning(
                "keyword_augmentation_failed",
                augmenter=self.augmenter.name,
                error=str(e),
            )
            return own, str(e)

        if not external:
            logger.debug("keyword_augmentation_empty", augmenter=self.augmenter.name)
        return merge_keywords(own, external), None

    def retrieve(
        self,
        question: str,
        top_k: int | None = None,
        max_hops: int | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RetrievalReport:
        """
        Retrieve the subgraph for ``question`` and report how it went.

        Args:
            question: Natural-language question
            top_k: Maximum seed nodes (default from config)
            max_hops: Expansion rounds (default from config)
            cancel_event: Set by the caller to stop before the next hop

        Returns:
            RetrievalReport wrapping the GraphContext

        Raises:
            RetrievalError: If seed selection cannot reach the store
            ValueError: If top_k < 1 or max_hops < 0
        """
        top_k = self.config.top_k if top_k is None else top_k
        max_hops = self.config.max_hops if max_hops is None else max_hops
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        if max_hops < 0:
            raise ValueError(f"max_hops must be >= 0, got {max_hops}")

        start = time.perf_counter()
        deadline = Deadline(self.config.timeout_seconds, cancel_event)

        with tracer.start_as_current_span("graph.retrieve_subgraph") as span:
            span.set_attribute("graph.top_k", top_k)
            span.set_attribute("graph.max_hops", max_hops)

            tokens, augmentation_error = self.collect_tokens(question)

            with tracer.start_as_current_span("graph.select_seeds"):
                seeds = self.seed_selector.select_seeds(tokens, top_k)

            expansion = self.expander.expand(seeds, max_hops, deadline)
            context = assemble(
                expansion.nodes,
                expansion.edges,
                hops_completed=expansion.hops_completed,
                failure=expansion.failure,
            )
            span.set_attribute("graph.nodes", len(context.nodes))
            span.set_attribute("graph.edges", len(context.edges))

        report = RetrievalReport(
            context=context,
            tokens=sorted(tokens),
            seed_count=len(seeds),
            top_k=top_k,
            max_hops=max_hops,
            duration_seconds=time.perf_counter() - start,
            augmentation_error=augmentation_error,
            frontier_sizes=expansion.frontier_sizes,
        )
        logger.info(
            "subgraph_retrieved",
            outcome=report.outcome,
            tokens=report.tokens,
            seeds=report.seed_count,
            nodes=len(context.nodes),
            edges=len(context.edges),
            hops=context.hops_completed,
        )
        return report

    def retrieve_subgraph(
        self,
        question: str,
        top_k: int | None = None,
        max_hops: int | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> GraphContext:
        """Retrieve the GraphContext for ``question``. See :meth:`retrieve`."""
        return self.retrieve(question, top_k, max_hops, cancel_event=cancel_event).context
