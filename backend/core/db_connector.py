"""
Database connector — SQLAlchemy engine factory and schema catalog reader.
Supports PostgreSQL and SQLite. Extracts tables, columns, PK/FK constraints,
sample rows, and the belongs_to / has_many relationships between tables.
"""
import logging
from typing import Any, Optional
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from config import settings
from core.errors import CatalogError
from models.schema import ColumnInfo, ColumnRef, ForeignKey, Relationship, SchemaDocument, TableInfo

logger = logging.getLogger(__name__)

SYSTEM_TABLE_PREFIXES = ("pg_", "sql_", "sqlite_")

_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Process-wide engine for DATABASE_URL, created on first use."""
    global _engine
    if _engine is None:
        _engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
    return _engine


def _get_default_schema(engine: Engine) -> Optional[str]:
    if engine.dialect.name == "postgresql":
        return "public"
    return None   # SQLite has no schema concept


class CatalogReader:
    """Reads the structural schema document from the database catalog."""

    def __init__(self, engine: Engine, sample_rows: int = 5):
        self.engine = engine
        self.sample_rows = sample_rows

    def read(self) -> SchemaDocument:
        try:
            schema = self._read_tables()
        except SQLAlchemyError as e:
            logger.error("Error reading database schema: %s", e)
            raise CatalogError(str(e)) from e
        _attach_relationships(schema)
        logger.info("Read schema with %d tables", len(schema))
        return schema

    def _read_tables(self) -> SchemaDocument:
        schema_name = _get_default_schema(self.engine)
        with self.engine.connect() as conn:
            insp = inspect(conn)
            table_names = sorted(
                t for t in insp.get_table_names(schema=schema_name)
                if not t.lower().startswith(SYSTEM_TABLE_PREFIXES)
            )
            schema: SchemaDocument = {}
            for table_name in table_names:
                pk = insp.get_pk_constraint(table_name, schema=schema_name)
                schema[table_name] = TableInfo(
                    columns=_reflect_columns(insp, table_name, schema_name),
                    primary_key=list(pk.get("constrained_columns") or []),
                    foreign_keys=_reflect_foreign_keys(insp, table_name, schema_name),
                    sample_data=self._sample_rows(conn, table_name, schema_name),
                )
        return schema

    def _sample_rows(self, conn, table_name: str, schema: Optional[str]) -> list[dict[str, Any]]:
        # Identifiers cannot be bound as parameters; quote them through the dialect instead.
        preparer = self.engine.dialect.identifier_preparer
        qualified = preparer.quote_identifier(table_name)
        if schema:
            qualified = f"{preparer.quote_identifier(schema)}.{qualified}"
        result = conn.execute(text(f"SELECT * FROM {qualified} LIMIT :n"), {"n": self.sample_rows})
        return [json_safe_row(row) for row in result.mappings()]


def json_safe_row(row) -> dict[str, Any]:
    """Row as a dict; binary values become a "<binary N bytes>" placeholder."""
    return {k: _coerce(v) for k, v in row.items()}


def _coerce(v):
    if isinstance(v, memoryview):
        v = v.tobytes()
    if isinstance(v, (bytes, bytearray)):
        return f"<binary {len(v)} bytes>"
    return v


def _reflect_columns(insp, table_name: str, schema: Optional[str]) -> list[ColumnInfo]:
    return [
        ColumnInfo(
            name=col["name"],
            type=str(col["type"]).lower(),
            nullable=bool(col.get("nullable", True)),
        )
        for col in insp.get_columns(table_name, schema=schema)
    ]


def _reflect_foreign_keys(insp, table_name: str, schema: Optional[str]) -> list[ForeignKey]:
    fks = []
    for fk in insp.get_foreign_keys(table_name, schema=schema):
        for local_col, remote_col in zip(fk["constrained_columns"], fk["referred_columns"]):
            fks.append(ForeignKey(
                column=local_col,
                references=ColumnRef(table=fk["referred_table"], column=remote_col),
            ))
    return fks


def _attach_relationships(schema: SchemaDocument) -> None:
    """
    Second pass over the whole document: every foreign key becomes a belongs_to
    entry on its own table and a has_many entry on the table it references.
    """
    for table_name, table in schema.items():
        relationships = [
            Relationship(
                type="belongs_to",
                table=fk.references.table,
                foreign_key=fk.column,
                target_key=fk.references.column,
            )
            for fk in table.foreign_keys
        ]
        # Self-references count on both sides.
        for other_name, other in schema.items():
            for fk in other.foreign_keys:
                if fk.references.table == table_name:
                    relationships.append(Relationship(
                        type="has_many",
                        table=other_name,
                        foreign_key=fk.column,
                        target_key=fk.references.column,
                    ))
        table.relationships = relationships
