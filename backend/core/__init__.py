from core.db_connector import CatalogReader, get_engine  # noqa: F401
from core.schema_semantics import annotate  # noqa: F401
from core.schema_cache import SchemaCache  # noqa: F401
from core.sql_generator import generate_sql  # noqa: F401
from core.query_executor import QueryExecutor  # noqa: F401
from core.visualizer import generate_visualizations, parse_visualizations  # noqa: F401
from core.explainer import generate_explanation, FALLBACK_EXPLANATION  # noqa: F401
from core.pipeline import QueryPipeline, PipelineState  # noqa: F401
