"""Pydantic schemas for the introspected database schema document."""
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

TableSemantics = Literal["fact_table", "dimension_table", "transaction_or_event", "central_entity"]


class ColumnSemantics(BaseModel):
    meaning: Optional[str] = None      # id | name | date | email | price | ...
    temporal: Optional[bool] = None
    numeric: Optional[bool] = None
    metric: Optional[bool] = None


class ColumnInfo(BaseModel):
    name: str
    type: str
    nullable: bool = True
    semantics: Optional[ColumnSemantics] = None


class ColumnRef(BaseModel):
    table: str
    column: str


class ForeignKey(BaseModel):
    column: str
    references: ColumnRef


class Relationship(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["belongs_to", "has_many"]
    table: str
    foreign_key: str = Field(alias="foreignKey")
    target_key: str = Field(alias="targetKey")


class TableInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    columns: list[ColumnInfo] = []
    primary_key: list[str] = Field(default_factory=list, alias="primaryKey")
    foreign_keys: list[ForeignKey] = Field(default_factory=list, alias="foreignKeys")
    sample_data: list[dict[str, Any]] = Field(default_factory=list, alias="sampleData")
    relationships: list[Relationship] = []
    semantics: Optional[TableSemantics] = None


# table name → TableInfo, tables in alphabetical order
SchemaDocument = dict[str, TableInfo]


def schema_to_dict(schema: SchemaDocument) -> dict[str, dict]:
    """JSON-ready view of a schema document using the wire (camelCase) field names."""
    return {
        name: table.model_dump(mode="json", by_alias=True, exclude_none=True)
        for name, table in schema.items()
    }
