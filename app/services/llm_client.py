"""
Thin async wrapper around the Gemini model.

Gemini is called through its OpenAI-compatible endpoint with the `openai`
SDK, so switching provider is a matter of LLM_BASE_URL / LLM_MODEL.
No retries: a failed call surfaces as LLMServiceError and the caller
decides whether to try again.
"""
from __future__ import annotations

import logging
import time
from typing import Optional, Protocol

from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, AsyncOpenAI

from app.core.config import settings
from app.core.errors import LLMNotConfiguredError, LLMServiceError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into reply text (real client or test fake)."""

    async def complete(self, prompt: str) -> str: ...


class LLMClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        api_key = api_key or settings.LLM_API_KEY
        if not api_key:
            raise LLMNotConfiguredError()

        self.model = model or settings.LLM_MODEL
        self.max_output_tokens = max_output_tokens or settings.LLM_MAX_OUTPUT_TOKENS
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or settings.LLM_BASE_URL,
            timeout=timeout or settings.LLM_TIMEOUT_SECONDS,
            max_retries=0,
        )

    async def complete(self, prompt: str) -> str:
        """Send a single user prompt and return the reply text."""
        logger.info("Sending prompt to %s (%d chars)", self.model, len(prompt))
        started = time.monotonic()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_output_tokens,
            )
        except APITimeoutError as exc:
            raise LLMServiceError(f"LLM request timed out: {exc}") from exc
        except APIConnectionError as exc:
            raise LLMServiceError(f"Connection to LLM service failed: {exc}") from exc
        except APIStatusError as exc:
            raise LLMServiceError(f"LLM API error: {exc}", status_code=exc.status_code) from exc
        except APIError as exc:
            raise LLMServiceError(f"LLM API error: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMServiceError("Empty response from LLM")

        logger.info(
            "Received %d chars from %s in %.0f ms",
            len(content), self.model, (time.monotonic() - started) * 1000,
        )
        logger.debug("Raw LLM response:\n%s", content)
        return content
