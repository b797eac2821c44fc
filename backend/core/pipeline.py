"""
Query pipeline — question → schema → SQL → rows → charts → explanation.

Stages run strictly in sequence. A failure up to and including query
execution moves the run to FAILED; the chart and explanation stages
degrade to empty / fallback output instead.
"""
import logging
from enum import Enum
from typing import Optional

from core.explainer import generate_explanation
from core.query_executor import QueryExecutor
from core.schema_cache import SchemaCache, SchemaSource
from core.schema_semantics import annotate
from core.sql_generator import TextModel, generate_sql
from core.visualizer import generate_visualizations
from models.query import QueryResponse

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    RECEIVED = "Received"
    SCHEMA_READY = "SchemaReady"
    SQL_GENERATED = "SQLGenerated"
    RESULTS_READY = "ResultsReady"
    VISUALIZATIONS_READY = "VisualizationsReady"
    EXPLAINED = "Explained"
    RESPONDED = "Responded"
    FAILED = "Failed"


_NEXT = {
    PipelineState.RECEIVED: PipelineState.SCHEMA_READY,
    PipelineState.SCHEMA_READY: PipelineState.SQL_GENERATED,
    PipelineState.SQL_GENERATED: PipelineState.RESULTS_READY,
    PipelineState.RESULTS_READY: PipelineState.VISUALIZATIONS_READY,
    PipelineState.VISUALIZATIONS_READY: PipelineState.EXPLAINED,
    PipelineState.EXPLAINED: PipelineState.RESPONDED,
}

# States whose outgoing transition may fail the whole run.
_FATAL_FROM = {PipelineState.RECEIVED, PipelineState.SCHEMA_READY, PipelineState.SQL_GENERATED}


class PipelineRun:
    """State of one request as it moves through the pipeline."""

    def __init__(self, question: str):
        self.question = question
        self.state = PipelineState.RECEIVED
        self.response: Optional[QueryResponse] = None
        self.error: Optional[str] = None

    def advance(self, target: PipelineState) -> None:
        if _NEXT.get(self.state) is not target:
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} → {target.value}")
        logger.debug("Pipeline %s → %s", self.state.value, target.value)
        self.state = target

    def fail(self, error: Exception) -> None:
        if self.state not in _FATAL_FROM:
            raise RuntimeError(f"Pipeline cannot fail from {self.state.value}")
        logger.info("Pipeline failed after %s: %s", self.state.value, error)
        self.state = PipelineState.FAILED
        self.error = str(error) or error.__class__.__name__

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.RESPONDED


class QueryPipeline:

    def __init__(self, cache: SchemaCache, reader: SchemaSource, llm: TextModel, executor: QueryExecutor):
        self.cache = cache
        self.reader = reader
        self.llm = llm
        self.executor = executor

    def run(self, question: str) -> PipelineRun:
        run = PipelineRun(question)
        try:
            schema = annotate(self.cache.get(self.reader))
            run.advance(PipelineState.SCHEMA_READY)

            sql = generate_sql(question, schema, self.llm)
            run.advance(PipelineState.SQL_GENERATED)

            result = self.executor.execute(sql)
            run.advance(PipelineState.RESULTS_READY)
        except Exception as e:
            logger.exception("Error processing query")
            run.fail(e)
            return run

        visualizations = generate_visualizations(question, result, sql, self.llm)
        run.advance(PipelineState.VISUALIZATIONS_READY)

        text = generate_explanation(question, result, sql, visualizations, self.llm)
        run.advance(PipelineState.EXPLAINED)

        run.response = QueryResponse(
            text=text,
            sql_query=sql,
            table_data=result,
            visualizations=visualizations,
        )
        run.advance(PipelineState.RESPONDED)
        return run
