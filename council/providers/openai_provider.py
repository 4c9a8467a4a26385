"""OpenAI provider using openai SDK with native async.

Also serves any OpenAI-compatible endpoint (Perplexity, OpenRouter, xAI)
when the agent config carries a base_url.
"""

import asyncio
import logging
import os
import time

from openai import AsyncOpenAI

from config.config_loader import AgentConfig
from council.models import Completion
from council.providers.base import ProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """OpenAI-compatible chat completions provider."""

    def __init__(self, config: AgentConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = AsyncOpenAI(api_key=api_key, base_url=config.base_url)

    def name(self) -> str:
        return "openai"

    def model_string(self) -> str:
        return self._config.model

    async def generate(self, prompt: str, system_prompt: str, temperature: float) -> Completion:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self._config.model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": prompt},
                    ],
                    max_tokens=self._config.max_tokens,
                    temperature=temperature,
                ),
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {self._config.timeout_sec}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise ProviderError(self._config.name, "Empty response content")

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.total_tokens

        logger.info("OpenAI (%s): %.2fs, %s tokens", self._config.name, latency, token_count)

        return Completion(
            provider=self.name(),
            model=self._config.model,
            content=choice.message.content,
            latency_sec=latency,
            token_count=token_count,
        )
