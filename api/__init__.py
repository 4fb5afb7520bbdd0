"""HTTP service exposing schema subgraph retrieval and text-to-SQL."""

__version__ = "0.1.0"
