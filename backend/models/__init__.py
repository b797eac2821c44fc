from models.schema import ColumnInfo, ColumnSemantics, ForeignKey, Relationship, TableInfo, SchemaDocument  # noqa: F401
from models.query import QueryRequest, QueryResponse, QueryResult, ErrorResponse  # noqa: F401
