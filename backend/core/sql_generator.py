"""
SQL generator — turns a natural-language question into a PostgreSQL statement.
"""
import json
import logging
import re
from typing import Protocol

from core.errors import GenerationError
from models.schema import SchemaDocument, schema_to_dict
from prompts.data_agent import sql_generation_prompt

logger = logging.getLogger(__name__)

# Opening fence with an optional language tag alone on its line, or any bare fence
_FENCE = re.compile(r"```[a-zA-Z]*[ \t]*(?=\n|$)|```")


class TextModel(Protocol):
    def generate(self, prompt: str) -> str: ...


def build_sql_prompt(question: str, schema: SchemaDocument) -> str:
    return sql_generation_prompt.format(
        schema_json=json.dumps(schema_to_dict(schema), indent=2, default=str),
        question=question,
    )


def clean_sql(raw: str) -> str:
    """Strip Markdown code fences and surrounding whitespace from model output."""
    return _FENCE.sub("", raw.strip()).strip()


def generate_sql(question: str, schema: SchemaDocument, llm: TextModel) -> str:
    prompt = build_sql_prompt(question, schema)
    try:
        raw = llm.generate(prompt)
    except Exception as e:
        logger.error("Error generating SQL: %s", e)
        raise GenerationError("Failed to generate SQL query") from e
    sql = clean_sql(raw)
    logger.debug("Generated SQL: %s", sql)
    return sql
