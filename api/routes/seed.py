"""
Seeding Routes
==============

Loads a relational schema into the graph store.
"""

from fastapi import APIRouter, HTTPException, Request

from api.schemas import ErrorResponse, SeedRequest, SeedResponse
from graphrag_text2sql.errors import StoreError
from graphrag_text2sql.seeder import (
    SAMPLE_SCHEMA,
    ForeignKeyDef,
    SchemaDefinition,
    SchemaSeeder,
    TableDef,
)
from observability.logging_config import get_logger

router = APIRouter(prefix="/api/v1", tags=["Seeding"])
logger = get_logger(__name__)


@router.post(
    "/seed",
    response_model=SeedResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid schema definition"},
        503: {"model": ErrorResponse, "description": "Graph store unavailable"},
    },
    summary="Seed the schema graph",
    description="Upserts table/column nodes and has_column/fk edges. Re-seeding is idempotent.",
)
def seed_schema(request: Request, body: SeedRequest | None = None) -> SeedResponse:
    definition = SAMPLE_SCHEMA
    if body is not None and body.definition is not None:
        d = body.definition
        definition = SchemaDefinition(
            schema=d.schema_name,
            pk=d.pk,
            tables=[TableDef(t.name, list(t.columns)) for t in d.tables],
            foreign_keys=[ForeignKeyDef(**fk.model_dump()) for fk in d.foreign_keys],
        )

    seeder = SchemaSeeder(request.app.state.store)
    try:
        result = seeder.seed(definition)
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "InvalidSchema", "message": str(e)},
        )
    except StoreError as e:
        logger.error("seed_failed", error=str(e))
        raise HTTPException(
            status_code=503,
            detail={"error": "StoreUnavailable", "message": str(e)},
        )

    return SeedResponse(
        schema_name=definition.schema,
        tables=result.tables,
        columns=result.columns,
        has_column_edges=result.has_column_edges,
        fk_edges=result.fk_edges,
    )
