"""
Gemini REST API client.
Wraps POST /v1beta/models/{model}:generateContent for text completion.
"""
import logging
from typing import Optional
import httpx

from config import settings

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin client for the Google Generative Language API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base = settings.GEMINI_API_BASE.rstrip("/")
        self.model = model or settings.GEMINI_MODEL
        self.client = httpx.Client(
            timeout=settings.LLM_TIMEOUT_SECONDS,
            headers={"x-goog-api-key": api_key if api_key is not None else settings.GEMINI_API_KEY},
            transport=transport,
        )

    def generate(self, prompt: str, temperature: float = 0.2) -> str:
        """Send a single prompt and return the model's trimmed text response."""
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature},
        }
        try:
            resp = self.client.post(
                f"{self.base}/v1beta/models/{self.model}:generateContent",
                json=payload,
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise RuntimeError(f"Gemini request failed: {e}") from e

        text = _candidate_text(resp.json())
        if text is None:
            raise RuntimeError("Gemini returned no text candidates")
        logger.debug("Gemini response length: %d chars", len(text))
        return text.strip()

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()


def _candidate_text(body: dict) -> Optional[str]:
    candidates = body.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [p["text"] for p in parts if "text" in p]
    if not texts:
        return None
    return "".join(texts)
