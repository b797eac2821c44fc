"""
Visualization generator — asks the model for chart specs and parses them
out of free-form text. Never raises: any failure yields an empty list.
"""
import json
import logging
import re
from typing import Any, Callable, Optional

from core.sql_generator import TextModel
from models.query import QueryResult
from prompts.data_agent import visualization_prompt

logger = logging.getLogger(__name__)

MAX_PIE_SEGMENTS = 7
MAX_VISUALIZATIONS = 2   # soft limit, only stated in the prompt

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


# ── Parsing ───────────────────────────────────────────────────────────────────

def _from_fenced_block(content: str) -> Optional[str]:
    m = _FENCED_BLOCK.search(content)
    return m.group(1) if m else None


def _from_bracket_span(content: str) -> Optional[str]:
    start, end = content.find("["), content.rfind("]")
    if start == -1 or end <= start:
        return None
    return content[start:end + 1]


def _from_raw_text(content: str) -> Optional[str]:
    return f"[{content.strip()}]"


EXTRACTORS: list[Callable[[str], Optional[str]]] = [
    _from_fenced_block,
    _from_bracket_span,
    _from_raw_text,
]


def _parse_candidate(candidate: str) -> Optional[list]:
    """Parse as-is; text that is not already an array is also tried wrapped in brackets."""
    attempts = [candidate]
    if not candidate.lstrip().startswith("["):
        attempts.append(f"[{candidate}]")
    for text in attempts:
        try:
            parsed = json.loads(text)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            parsed = [parsed]
        if isinstance(parsed, list):
            return parsed
    return None


def parse_visualizations(content: str) -> list[dict[str, Any]]:
    """Try each extraction strategy in turn; the first one that parses wins."""
    for extract in EXTRACTORS:
        candidate = extract(content)
        if candidate is None:
            continue
        parsed = _parse_candidate(candidate)
        if parsed is not None:
            return [v for v in parsed if isinstance(v, dict)]
    logger.warning("Could not parse visualization JSON. Raw content: %s", content[:2000])
    return []


# ── Post-processing ───────────────────────────────────────────────────────────

def cap_pie_segments(spec: dict[str, Any], limit: int = MAX_PIE_SEGMENTS) -> dict[str, Any]:
    """Fold pie data beyond `limit` points into an "Other" slice (or truncate)."""
    data = spec.get("data")
    if spec.get("type") != "pie" or not isinstance(data, list) or len(data) <= limit:
        return spec

    name_key, value_key = spec.get("nameKey"), spec.get("valueKey")
    head, tail = data[:limit - 1], data[limit - 1:]
    foldable = (
        name_key and value_key
        and all(isinstance(d, dict) and isinstance(d.get(value_key), (int, float)) for d in tail)
    )
    if foldable:
        other = {name_key: "Other", value_key: sum(d[value_key] for d in tail)}
        return {**spec, "data": head + [other]}
    return {**spec, "data": data[:limit]}


# ── Generation ────────────────────────────────────────────────────────────────

def generate_visualizations(question: str, result: QueryResult, sql: str, llm: TextModel) -> list[dict[str, Any]]:
    try:
        prompt = visualization_prompt.format(
            question=question,
            sql=sql,
            results_json=json.dumps(result.model_dump(), default=str),
            max_pie_segments=MAX_PIE_SEGMENTS,
            max_visualizations=MAX_VISUALIZATIONS,
        )
        content = llm.generate(prompt).strip()
    except Exception as e:
        logger.warning("Error generating visualizations: %s", e)
        return []
    return [cap_pie_segments(v) for v in parse_visualizations(content)]
