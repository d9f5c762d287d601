"""Claude API wrapper with async support and retry logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from resume_optimizer.errors import ModelCallFailure
from resume_optimizer.models.analysis import TokenUsage

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

_TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int

    @property
    def usage(self) -> TokenUsage:
        return TokenUsage(
            prompt_tokens=self.input_tokens,
            completion_tokens=self.output_tokens,
            total_tokens=self.input_tokens + self.output_tokens,
        )


class LLMClient:
    """Async Claude API client with exponential-backoff retries.

    Requests follow the chat contract ``{model, messages: [{role, content}],
    temperature}``; system-role messages are sent as the system prompt.
    """

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _call_api(
        self,
        messages: list[dict],
        system: str,
        model: str,
        temperature: float | None,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make the actual API call with retry logic."""
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if system:
            kwargs["system"] = system
        return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        messages: list[dict],
        model: str = DEFAULT_MODEL,
        temperature: float | None = None,
        max_tokens: int = 8192,
    ) -> LLMResponse:
        """Send chat messages to Claude and return the text response with usage.

        ``temperature=None`` leaves the provider default in place.
        """
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        chat = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] != "system"
        ]
        logger.debug("LLM call: model=%s temperature=%s", model, temperature)
        try:
            message = await self._call_api(
                messages=chat,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except anthropic.APIError as exc:
            logger.error("LLM call failed", exc_info=True)
            raise ModelCallFailure(f"Model call failed: {exc}") from exc
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        text = "".join(
            getattr(block, "text", "") for block in message.content
        )
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

