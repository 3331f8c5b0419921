"""
Groq API Client

Thin async wrapper around the Groq Python SDK for free-text headline
analysis. Retries once on transient errors and enforces a hard timeout.
"""
from __future__ import annotations

import logging
import time

from groq import APIStatusError, APITimeoutError, AsyncGroq, RateLimitError

from newsdesk.core.types import AnalysisError

logger = logging.getLogger(__name__)

MODEL = "llama-3.3-70b-versatile"
MAX_RETRIES = 1
TIMEOUT_S = 30.0
TEMPERATURE = 0.3
MAX_TOKENS = 1200


class GroqClient:
    """
    Async Groq chat-completion client.

    Create once at startup and reuse across requests. Falls back to the
    GROQ_API_KEY environment variable when no key is passed.
    """

    def __init__(self, api_key: str | None = None, model: str = MODEL) -> None:
        self._client = AsyncGroq(api_key=api_key or None)
        self._model = model

    async def complete(self, prompt: str, headline: str = "") -> str:
        """
        Send one user turn and return the text of the reply.

        Raises AnalysisError on permanent failure or an empty reply.
        """
        messages = [{"role": "user", "content": prompt}]
        last_error: Exception | None = None

        for attempt in range(1 + MAX_RETRIES):
            try:
                t0 = time.monotonic()
                completion = await self._client.chat.completions.create(
                    model=self._model,
                    messages=messages,
                    temperature=TEMPERATURE,
                    max_completion_tokens=MAX_TOKENS,
                    stream=False,
                    timeout=TIMEOUT_S,
                )
                elapsed_ms = (time.monotonic() - t0) * 1000
                text = completion.choices[0].message.content
                if not text:
                    raise AnalysisError("No analysis generated", headline=headline)

                logger.info(
                    f"Headline analysis in {elapsed_ms:.0f}ms",
                    extra={"latency_ms": elapsed_ms, "model": self._model},
                )
                return text

            except (RateLimitError, APITimeoutError) as e:
                last_error = e
                if attempt < MAX_RETRIES:
                    logger.warning(f"Groq transient error (attempt {attempt + 1}), retrying: {e}")
                    continue
            except APIStatusError as e:
                if e.status_code >= 500 and attempt < MAX_RETRIES:
                    last_error = e
                    logger.warning(f"Groq 5xx error (attempt {attempt + 1}), retrying: {e}")
                    continue
                raise AnalysisError(
                    f"Groq API error {e.status_code}: {e}", headline=headline
                ) from e

        raise AnalysisError(
            f"Groq failed after {1 + MAX_RETRIES} attempts: {last_error}",
            headline=headline,
        )
