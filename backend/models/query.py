"""Pydantic schemas for the natural-language query API."""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class QueryRequest(BaseModel):
    query: str
    history: Optional[Any] = None   # accepted for frontend compatibility, not used


class QueryResult(BaseModel):
    columns: list[str] = []
    rows: list[dict[str, Any]] = []


class QueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    sql_query: str = Field(alias="sqlQuery")
    table_data: QueryResult = Field(alias="tableData")
    visualizations: list[dict[str, Any]] = []


class ErrorResponse(BaseModel):
    error: str
