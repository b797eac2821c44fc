"""
Schema semantics — name/type heuristics that label columns and tables.

Pure functions, no I/O. Rules are ordered; the first match wins.
"""
import logging
import re
from typing import Callable, Optional

from models.schema import ColumnInfo, ColumnSemantics, SchemaDocument, TableInfo, TableSemantics

logger = logging.getLogger(__name__)


COLUMN_MEANINGS: list[tuple[str, re.Pattern]] = [
    ("id",          re.compile(r"^id$|^.*_id$", re.I)),
    ("name",        re.compile(r"^name$|^.*_name$", re.I)),
    ("date",        re.compile(r"^date$|^.*_date$|^.*_at$", re.I)),
    ("email",       re.compile(r"^email$", re.I)),
    ("price",       re.compile(r"^price$|^.*_price$|^cost$|^.*_cost$", re.I)),
    ("quantity",    re.compile(r"^quantity$|^.*_quantity$|^count$|^.*_count$", re.I)),
    ("status",      re.compile(r"^status$|^.*_status$", re.I)),
    ("type",        re.compile(r"^type$|^.*_type$", re.I)),
    ("description", re.compile(r"^description$|^.*_description$", re.I)),
]

METRIC_NAME = re.compile(r"amount|total|sum|price|cost|revenue|profit|count|quantity", re.I)

_TEMPORAL_TYPES = ("timestamp", "date", "time")
_NUMERIC_TYPE = re.compile(
    r"\b(?:tinyint|smallint|mediumint|bigint|integer|int[248]?|smallserial|bigserial|serial[48]?"
    r"|decimal|numeric|float[48]?|double|real|money)\b"
)


def is_temporal_type(type_name: str) -> bool:
    t = type_name.lower()
    return any(k in t for k in _TEMPORAL_TYPES)


def is_numeric_type(type_name: str) -> bool:
    return bool(_NUMERIC_TYPE.search(type_name.lower()))


def column_semantics(col: ColumnInfo) -> ColumnSemantics:
    sem = ColumnSemantics()
    for meaning, pattern in COLUMN_MEANINGS:
        if pattern.search(col.name):
            sem.meaning = meaning
            break

    if is_temporal_type(col.type):
        sem.temporal = True
    elif is_numeric_type(col.type):
        sem.numeric = True
        if METRIC_NAME.search(col.name):
            sem.metric = True
    return sem


def _has_temporal_and_metric(name: str, table: TableInfo) -> bool:
    has_temporal = any(is_temporal_type(c.type) for c in table.columns)
    has_metric = any(c.semantics and c.semantics.metric for c in table.columns)
    return has_temporal and has_metric


def _has_many_children(name: str, table: TableInfo) -> bool:
    return sum(1 for r in table.relationships if r.type == "has_many") > 2


TABLE_RULES: list[tuple[Callable[[str, TableInfo], bool], TableSemantics]] = [
    (lambda name, t: "fact" in name.lower(),                               "fact_table"),
    (lambda name, t: "dim" in name.lower() or "dimension" in name.lower(), "dimension_table"),
    (_has_temporal_and_metric,                                              "transaction_or_event"),
    (_has_many_children,                                                    "central_entity"),
]


def table_semantics(name: str, table: TableInfo) -> Optional[TableSemantics]:
    """Columns must already carry their semantics."""
    for predicate, label in TABLE_RULES:
        if predicate(name, table):
            return label
    return None


def annotate(schema: SchemaDocument) -> SchemaDocument:
    """
    Return a copy of the schema with column and table semantics filled in.
    Falls back to the input document unchanged if anything goes wrong.
    """
    try:
        annotated: SchemaDocument = {}
        for name, table in schema.items():
            table = table.model_copy(deep=True)
            for col in table.columns:
                col.semantics = column_semantics(col)
            label = table_semantics(name, table)
            if label:
                table.semantics = label
            annotated[name] = table
        return annotated
    except Exception as e:
        logger.warning("Error inferring schema semantics: %s", e)
        return schema
