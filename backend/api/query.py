"""POST /api/query — natural-language question → SQL, rows, charts and explanation."""
import logging
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config import settings
from core.db_connector import CatalogReader, get_engine
from core.errors import CatalogError
from core.pipeline import PipelineRun, QueryPipeline
from core.query_executor import QueryExecutor
from core.schema_cache import SchemaCache
from integrations.gemini_client import GeminiClient
from models.query import ErrorResponse, QueryRequest, QueryResponse

router = APIRouter()
logger = logging.getLogger(__name__)

# Process-wide catalog cache shared by every request
schema_cache = SchemaCache(ttl_seconds=settings.SCHEMA_CACHE_TTL_SECONDS)


def run_query(question: str) -> PipelineRun:
    try:
        engine = get_engine()
    except Exception as e:
        logger.exception("Could not create database engine")
        run = PipelineRun(question)
        run.fail(CatalogError(str(e)))
        return run
    with GeminiClient() as llm:
        pipeline = QueryPipeline(
            cache=schema_cache,
            reader=CatalogReader(engine, sample_rows=settings.SAMPLE_ROWS),
            llm=llm,
            executor=QueryExecutor(
                engine,
                timeout_seconds=settings.QUERY_TIMEOUT_SECONDS,
                allow_writes=settings.SQL_ALLOW_WRITES,
            ),
        )
        return pipeline.run(question)


@router.post("/query", response_model=QueryResponse, responses={500: {"model": ErrorResponse}})
def query(req: QueryRequest):
    logger.info("Query: %s", req.query[:80])
    run = run_query(req.query)
    if not run.succeeded:
        return JSONResponse(status_code=500, content={"error": run.error})
    return run.response
