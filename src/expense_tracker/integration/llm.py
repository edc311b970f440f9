import os
from time import perf_counter

import httpx
from openai import OpenAI

from expense_tracker.core import settings
from expense_tracker.logger import get_logger

logger = get_logger(__name__)


class LLMClient:
    """
    Thin wrapper around an OpenAI-compatible chat endpoint.

    One request per call: ``max_retries`` is 0 and the wait is bounded by
    ``timeout``, so a failing model hands control back to the caller's
    fallback immediately. Gemini is reachable through its OpenAI-compatible
    base URL.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self.model = model or settings.llm_model()
        self.timeout = timeout if timeout is not None else settings.llm_timeout()
        self.client = OpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL") or None,
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            max_retries=0,
        )

    def complete(self, prompt: str, *, temperature: float = 0.1) -> str | None:
        """Send a single prompt and return the text of the reply, or None on any failure."""
        started = perf_counter()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
            )
        except Exception as e:
            logger.error("[LLM] Request to %s failed after %.2f s: %s", self.model, perf_counter() - started, e)
            return None

        text = self._extract_output_text(response)
        logger.debug(
            "[LLM] %s replied in %.2f s (%d chars)",
            self.model,
            perf_counter() - started,
            len(text or ""),
        )
        return text

    @staticmethod
    def _extract_output_text(response: object) -> str | None:
        choices = getattr(response, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if isinstance(content, str) and content.strip():
            return content
        return None


def create_llm_client() -> LLMClient | None:
    if not settings.llm_enabled():
        logger.warning("OPENAI_API_KEY not found. AI parsing and AI predictions disabled.")
        return None
    client = LLMClient()
    logger.info(
        "LLM enabled: model=%s, base_url=%s, timeout=%.1fs",
        client.model,
        os.getenv("OPENAI_BASE_URL") or "default",
        client.timeout,
    )
    return client
