"""
Configuration
=============

Explicit configuration structures. Environment variables are read once, at
the application edge, through the ``from_env`` constructors.
"""

import os
from dataclasses import dataclass, field
from typing import Literal, Optional

DEFAULT_TOP_K = 30
DEFAULT_MAX_HOPS = 2
DEFAULT_PAGE_SIZE = 100


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RetrievalConfig:
    """Knobs for a subgraph retrieval.

    Attributes:
        top_k: Maximum number of seed nodes (>= 1).
        max_hops: Number of neighbor expansion rounds (>= 0).
        timeout_seconds: Deadline for one retrieval, None for no deadline.
        page_size: Page size requested from the store for paged queries.
    """

    top_k: int = DEFAULT_TOP_K
    max_hops: int = DEFAULT_MAX_HOPS
    timeout_seconds: Optional[float] = None
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {self.top_k}")
        if self.max_hops < 0:
            raise ValueError(f"max_hops must be >= 0, got {self.max_hops}")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        """Create configuration from GRAPH_* environment variables."""
        return cls(
            top_k=_env_int("GRAPH_TOP_K", DEFAULT_TOP_K),
            max_hops=_env_int("GRAPH_MAX_HOPS", DEFAULT_MAX_HOPS),
            timeout_seconds=_env_float("GRAPH_TIMEOUT_SECONDS"),
            page_size=_env_int("GRAPH_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        )


@dataclass(frozen=True)
class Neo4jConfig:
    """Neo4j connection settings."""

    uri: str = "bolt://localhost:7687"
    user: str = "neo4j"
    password: str = ""
    database: str = "neo4j"

    @classmethod
    def from_env(cls) -> "Neo4jConfig":
        return cls(
            uri=os.getenv("NEO4J_URI", cls.uri),
            user=os.getenv("NEO4J_USER", cls.user),
            password=os.getenv("NEO4J_PASSWORD", cls.password),
            database=os.getenv("NEO4J_DATABASE", cls.database),
        )


@dataclass(frozen=True)
class AppConfig:
    """Service-level configuration."""

    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    neo4j: Neo4jConfig = field(default_factory=Neo4jConfig)
    graph_backend: Literal["memory", "neo4j"] = "memory"
    seed_on_startup: bool = True

    @classmethod
    def from_env(cls) -> "AppConfig":
        backend = os.getenv("GRAPH_BACKEND", "memory").strip().lower()
        if backend not in ("memory", "neo4j"):
            raise ValueError(f"GRAPH_BACKEND must be 'memory' or 'neo4j', got {backend!r}")
        return cls(
            retrieval=RetrievalConfig.from_env(),
            neo4j=Neo4jConfig.from_env(),
            graph_backend=backend,
            seed_on_startup=_env_bool("SEED_ON_STARTUP", True),
        )
