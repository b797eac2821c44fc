import pytest

from core.errors import GenerationError
from core.sql_generator import build_sql_prompt, clean_sql, generate_sql
from models.schema import ColumnInfo, TableInfo

SCHEMA = {
    "orders": TableInfo(columns=[
        ColumnInfo(name="id", type="integer", nullable=False),
        ColumnInfo(name="amount", type="numeric"),
        ColumnInfo(name="created_at", type="timestamp without time zone"),
    ], primary_key=["id"]),
}


@pytest.mark.parametrize("raw,expected", [
    ("SELECT 1", "SELECT 1"),
    ("  SELECT 1;\n", "SELECT 1;"),
    ("```sql\nSELECT * FROM orders\n```", "SELECT * FROM orders"),
    ("```SQL\nSELECT * FROM orders\n```", "SELECT * FROM orders"),
    ("```\nSELECT * FROM orders\n```", "SELECT * FROM orders"),
    ("```postgresql\nSELECT * FROM orders\n```", "SELECT * FROM orders"),
    ("```SELECT 1```", "SELECT 1"),
])
def test_clean_sql_strips_fences(raw, expected):
    assert clean_sql(raw) == expected


def test_prompt_embeds_schema_question_and_dialect_rules():
    prompt = build_sql_prompt("total sales last quarter", SCHEMA)
    assert '"orders"' in prompt
    assert '"primaryKey": [\n      "id"\n    ]' in prompt
    assert "total sales last quarter" in prompt
    assert "PostgreSQL syntax" in prompt
    assert "date('now', ...)" in prompt
    assert "CAST(column AS DATE)" in prompt


def test_generate_sql_returns_cleaned_model_output(fake_llm):
    llm = fake_llm("```sql\nSELECT SUM(amount) FROM orders\n```")
    assert generate_sql("total sales", SCHEMA, llm) == "SELECT SUM(amount) FROM orders"
    assert len(llm.prompts) == 1


def test_transport_failure_raises_generation_error(fake_llm):
    llm = fake_llm(RuntimeError("Gemini request failed: 503"))
    with pytest.raises(GenerationError, match="Failed to generate SQL query"):
        generate_sql("total sales", SCHEMA, llm)
