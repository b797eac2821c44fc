from datetime import datetime
from decimal import Decimal

from core.explainer import FALLBACK_EXPLANATION, generate_explanation
from models.query import QueryResult

RESULT = QueryResult(
    columns=["month", "revenue"],
    rows=[{"month": datetime(2024, 3, 1), "revenue": Decimal("1250.50")}],
)


def test_returns_trimmed_model_text(fake_llm):
    llm = fake_llm("\n  Revenue in March reached $1,250.50.  \n")
    text = generate_explanation("revenue by month", RESULT, "SELECT ...", [], llm)
    assert text == "Revenue in March reached $1,250.50."


def test_prompt_includes_question_results_and_charts(fake_llm):
    llm = fake_llm("ok")
    charts = [{"type": "line", "title": "Revenue trend", "data": []}]
    generate_explanation("revenue by month", RESULT, "SELECT month, revenue FROM sales", charts, llm)
    prompt = llm.prompts[0]
    assert '"revenue by month"' in prompt
    assert "1250.50" in prompt
    assert "Revenue trend" in prompt
    assert "Do not mention the SQL query itself." in prompt


def test_transport_failure_returns_fallback(fake_llm):
    llm = fake_llm(RuntimeError("Gemini request failed: connection reset"))
    assert generate_explanation("q", RESULT, "SELECT 1", [], llm) == FALLBACK_EXPLANATION
    assert FALLBACK_EXPLANATION == (
        "I couldn't generate an explanation for these results. Please review the data directly."
    )
