"""Async OpenAI client wrapper that drafts playbook content."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_SECONDS = 50.0
DEFAULT_MAX_TOKENS = 4000

SYSTEM_PROMPT = (
    "You are an expert SaaS launch strategist. Be direct and actionable, use "
    "specific numbers, and assume the founder has limited time. Return valid "
    "JSON only, no markdown fences and no commentary."
)


class GenerationError(RuntimeError):
    """Upstream content generation failed."""


class LLMUnavailableError(GenerationError):
    """Raised when the OpenAI client cannot be initialized or the provider rejects the call."""


class GenerationTimeoutError(GenerationError):
    """The upstream call did not finish inside the configured ceiling."""


class EmptyGenerationError(GenerationError):
    """The provider answered but produced no text."""


def _timeout_from_env() -> float:
    return float(os.getenv("GENERATION_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)))


def extract_json_text(content: str) -> str:
    """Return the ``{...}`` slice of ``content`` when it parses, else ``content``."""

    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end > start:
        candidate = content[start : end + 1]
        try:
            json.loads(candidate)
        except ValueError:
            logger.warning("llm_response_not_json", extra={"chars": len(content)})
            return content
        return candidate
    return content


class LLMClient:
    """Thin wrapper over ``AsyncOpenAI`` built once at startup.

    ``generate`` races the provider call against a fixed timeout and maps
    provider failures onto :class:`GenerationError` subclasses.
    """

    def __init__(
        self,
        client: Any = None,
        *,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        self._client = client
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
        self.timeout = timeout if timeout is not None else _timeout_from_env()
        self.max_tokens = max_tokens or int(os.getenv("OPENAI_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))

    @classmethod
    def from_env(cls) -> "LLMClient":
        """Create a client from ``OPENAI_*`` variables.

        A missing API key is not an error here; the first ``generate`` call
        raises instead, so the app can still start and serve the free tier.
        """

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            logger.warning("llm_client_unconfigured")
            return cls(client=None)

        kwargs = {"api_key": api_key, "timeout": _timeout_from_env() + 5}
        base_url = os.getenv("OPENAI_BASE_URL")
        if base_url:
            kwargs["base_url"] = base_url
        org_id = os.getenv("OPENAI_ORG_ID")
        if org_id:
            kwargs["organization"] = org_id
        return cls(client=AsyncOpenAI(**kwargs))

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def _complete(self, prompt: str) -> str:
        result = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self.max_tokens,
            temperature=0.7,
        )
        content = result.choices[0].message.content if result.choices else ""
        return (content or "").strip()

    async def generate(self, prompt: str) -> str:
        """Generate playbook text for ``prompt``; JSON is sliced out when present."""

        if self._client is None:
            raise LLMUnavailableError("OPENAI_API_KEY is not configured")

        try:
            content = await asyncio.wait_for(self._complete(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error("llm_timeout", extra={"timeout_s": self.timeout, "model": self.model})
            raise GenerationTimeoutError(
                f"Content generation timed out after {self.timeout:g} seconds. Please try again in a moment."
            ) from exc
        except Exception as exc:
            raise _map_provider_error(exc) from exc

        if not content:
            raise EmptyGenerationError("Content generation returned an empty response")

        logger.info("llm_generated", extra={"chars": len(content), "model": self.model})
        return extract_json_text(content)


def _map_provider_error(exc: Exception) -> GenerationError:
    error_msg = str(exc)
    lowered = error_msg.lower()
    error_type = type(exc).__name__

    if "insufficient_quota" in lowered or "quota" in lowered or "resource_exhausted" in lowered:
        return LLMUnavailableError(f"AI provider quota exceeded: {error_msg}")
    if "rate_limit" in lowered or "rate limit" in lowered or "429" in lowered:
        return LLMUnavailableError(f"AI provider rate limit exceeded: {error_msg}")
    if "invalid_api_key" in lowered or "authentication" in lowered:
        return LLMUnavailableError(f"Invalid AI provider API key: {error_msg}")
    if "timeout" in lowered or "timed out" in lowered or error_type in {"TimeoutError", "APITimeoutError"}:
        return GenerationTimeoutError("AI provider request timed out. Please try again in a moment.")
    return LLMUnavailableError(f"AI provider error: {error_msg}")
