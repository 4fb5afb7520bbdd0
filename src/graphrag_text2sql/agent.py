"""
Graph RAG Text-to-SQL Agent
===========================

Orchestrates question answering: retrieve the schema subgraph, render it,
and ask the LLM for SQL grounded in it.
"""

import threading

import structlog

from graphrag_text2sql.llm.base import LLMInterface
from graphrag_text2sql.models import AskResult, GeneratedSQL, GraphContext
from graphrag_text2sql.retrieval.render import render_relationships, render_schema
from graphrag_text2sql.retrieval.retriever import RetrievalReport, SubgraphRetriever

logger = structlog.get_logger(__name__)


class SQLGenerator:
    """
    Generates SQL for a question from the rendered schema subgraph.

    Only the retrieved tables, columns and relationships are shown to the
    model. Validation and execution of the SQL happen elsewhere.
    """

    SYSTEM_PROMPT = """You are a SQL query generator for PostgreSQL.
Use only the tables and columns listed in the schema context.
Join tables along the listed fk relationships (referencing -> referenced).
Return ONLY the SQL query, no explanations."""

    PROMPT_TEMPLATE = """Schema context:
{schema_context}
Relationships:
{relationships}
Question: {question}"""

    def __init__(self, llm: LLMInterface) -> None:
        self.llm = llm

    def build_prompt(self, question: str, ctx: GraphContext) -> str:
        return self.PROMPT_TEMPLATE.format(
            schema_context=render_schema(ctx),
            relationships=render_relationships(ctx),
            question=question,
        )

    @staticmethod
    def _extract_sql(llm_output: str) -> str:
        """Extract SQL from LLM output, handling markdown code blocks."""
        sql = llm_output.strip()
        if sql.startswith("```"):
            lines = sql.split("\n")
            # Drop the opening fence (and its language tag) and the closing one
            sql = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])
        return sql.strip()

    def generate(self, question: str, ctx: GraphContext) -> GeneratedSQL:
        prompt = self.build_prompt(question, ctx)
        response = self.llm.generate(prompt, system_prompt=self.SYSTEM_PROMPT, temperature=0.0)
        return GeneratedSQL(sql=self._extract_sql(response.content), prompt=prompt, model=response.model)


class GraphRAGAgent:
    """
    Answers questions with SQL grounded in a retrieved schema subgraph.

    The agent:
    1. Retrieves the relevant subgraph for the question
    2. Renders it into schema and relationship text
    3. Generates SQL from that text with the configured LLM
    """

    def __init__(self, retriever: SubgraphRetriever, generator: SQLGenerator) -> None:
        self.retriever = retriever
        self.generator = generator

    def ask(
        self,
        question: str,
        top_k: int | None = None,
        max_hops: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> AskResult:
        """
        Main entry point: question -> subgraph -> SQL.

        Raises:
            RetrievalError: If the schema graph could not be queried
        """
        report = self.retriever.retrieve(question, top_k, max_hops, cancel_event=cancel_event)
        return self.answer(question, report)

    def answer(self, question: str, report: RetrievalReport) -> AskResult:
        """Generate SQL for ``question`` from an already retrieved subgraph."""
        ctx = report.context

        warnings = []
        if ctx.failure is not None:
            warnings.append(ctx.failure.message)
        if report.augmentation_error:
            warnings.append(f"keyword augmentation failed: {report.augmentation_error}")

        schema_context = render_schema(ctx)
        relationships = render_relationships(ctx)

        if ctx.is_empty:
            logger.info("ask_no_schema_found", question=question)
            return AskResult(
                success=False,
                question=question,
                sql=None,
                context_tables=[],
                schema_context=schema_context,
                relationships=relationships,
                prompt_used="",
                partial=ctx.partial,
                warnings=warnings,
                message="No relevant schema found.",
            )

        generated = self.generator.generate(question, ctx)
        success = bool(generated.sql)
        if not success:
            logger.warning("sql_generation_empty", model=generated.model)

        return AskResult(
            success=success,
            question=question,
            sql=generated.sql or None,
            context_tables=ctx.table_names(),
            schema_context=schema_context,
            relationships=relationships,
            prompt_used=generated.prompt,
            partial=ctx.partial,
            warnings=warnings,
            message="SQL generated." if success else "SQL generation failed.",
        )
