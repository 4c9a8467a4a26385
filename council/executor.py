"""Agent executor: runs one agent turn against its provider, with retries.

The orchestrator only ever sees an async callable
``(agent_id, prompt, system_prompt) -> str``. ProviderExecutor is the shipped
implementation; it never raises for a failed agent call and returns a
placeholder string naming the agent instead.
"""

import asyncio
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Protocol

from council.providers.base import AIProvider, ProviderError
from council.roles import AgentId, get_role

logger = logging.getLogger(__name__)

_PLACEHOLDER_TEMPLATE = "[{agent} ERROR: Unable to generate response]"


@dataclass
class TokenUsage:
    """Tokens recorded during one orchestration session. None until the first count."""

    total: int | None = None

    def add(self, token_count: int) -> None:
        self.total = (self.total or 0) + token_count


_session_usage: ContextVar[TokenUsage | None] = ContextVar("session_usage", default=None)


@contextmanager
def track_tokens() -> Iterator[TokenUsage]:
    """Collect token counts recorded by executors inside this block.

    Tasks spawned inside the block (asyncio.gather) share the same TokenUsage.
    Sessions running concurrently on one executor each get their own.
    """
    usage = TokenUsage()
    reset_token = _session_usage.set(usage)
    try:
        yield usage
    finally:
        _session_usage.reset(reset_token)


class AgentExecutor(Protocol):
    async def __call__(self, agent_id: AgentId, prompt: str, system_prompt: str) -> str: ...


def failure_placeholder(agent_id: AgentId) -> str:
    """Content recorded for an agent whose call failed after all retries."""
    return _PLACEHOLDER_TEMPLATE.format(agent=agent_id.value.upper())


def is_failure_placeholder(content: str, agent_id: AgentId) -> bool:
    return content == failure_placeholder(agent_id)


class ProviderExecutor:
    """Dispatch agent turns to providers keyed by agent id.

    Args:
        providers: Provider per council seat. Seats without a provider
            always get the failure placeholder.
        max_retries: Retries after the first attempt.
        backoff_base_sec: Wait before retry n is backoff_base_sec * 2**n.
        temperatures: Per-agent overrides of the role default temperature.
    """

    def __init__(
        self,
        providers: Mapping[AgentId, AIProvider],
        max_retries: int = 2,
        backoff_base_sec: float = 1.0,
        temperatures: Mapping[AgentId, float] | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self._providers = dict(providers)
        self._max_retries = max_retries
        self._backoff_base_sec = backoff_base_sec
        self._temperatures = dict(temperatures or {})
        self.total_tokens: int | None = None

    def _record_tokens(self, token_count: int | None) -> None:
        if token_count is None:
            return
        self.total_tokens = (self.total_tokens or 0) + token_count
        usage = _session_usage.get()
        if usage is not None:
            usage.add(token_count)

    async def __call__(self, agent_id: AgentId, prompt: str, system_prompt: str) -> str:
        provider = self._providers.get(agent_id)
        if provider is None:
            logger.warning("No provider configured for agent %s", agent_id)
            return failure_placeholder(agent_id)

        temperature = self._temperatures.get(agent_id, get_role(agent_id).temperature)
        logger.debug("Agent %s: prompt %d chars, system %d chars", agent_id, len(prompt), len(system_prompt))

        for attempt in range(self._max_retries + 1):
            try:
                completion = await provider.generate(prompt, system_prompt, temperature)
            except ProviderError as exc:
                if attempt == self._max_retries:
                    logger.error(
                        "Agent %s failed after %d retries: %s", agent_id, self._max_retries, exc,
                    )
                    return failure_placeholder(agent_id)
                delay = self._backoff_base_sec * 2 ** attempt
                logger.warning(
                    "Agent %s attempt %d failed (%s), retrying in %.1fs",
                    agent_id, attempt + 1, exc, delay,
                )
                await asyncio.sleep(delay)
                continue

            self._record_tokens(completion.token_count)
            return completion.content

        return failure_placeholder(agent_id)
