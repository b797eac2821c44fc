"""Explanation generator — prose summary of the query results."""
import json
import logging
from typing import Any

from core.sql_generator import TextModel
from models.query import QueryResult
from prompts.data_agent import explanation_prompt

logger = logging.getLogger(__name__)

FALLBACK_EXPLANATION = (
    "I couldn't generate an explanation for these results. Please review the data directly."
)


def generate_explanation(
    question: str,
    result: QueryResult,
    sql: str,
    visualizations: list[dict[str, Any]],
    llm: TextModel,
) -> str:
    """Never raises; returns FALLBACK_EXPLANATION on any failure."""
    try:
        prompt = explanation_prompt.format(
            question=question,
            sql=sql,
            results_json=json.dumps(result.model_dump(), default=str),
            visualizations_json=json.dumps(visualizations, default=str),
        )
        return llm.generate(prompt).strip()
    except Exception as e:
        logger.warning("Error generating explanation: %s", e)
        return FALLBACK_EXPLANATION
