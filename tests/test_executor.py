"""Tests for council/executor.py."""

import logging
from unittest.mock import AsyncMock

import pytest

from council.executor import (
    ProviderExecutor,
    failure_placeholder,
    is_failure_placeholder,
    track_tokens,
)
from council.models import Completion
from council.providers.base import AIProvider, ProviderError
from council.roles import AgentId
from tests.conftest import MockProvider


def _completion(content: str = "ok", tokens: int | None = 5) -> Completion:
    return Completion(provider="mock", model="mock-model", content=content, latency_sec=0.1, token_count=tokens)


def test_placeholder_names_agent():
    assert failure_placeholder(AgentId.FACT_CHECKER) == "[FACT-CHECKER ERROR: Unable to generate response]"
    assert is_failure_placeholder(failure_placeholder(AgentId.ANALYST), AgentId.ANALYST)
    assert not is_failure_placeholder("fine", AgentId.ANALYST)


def test_mock_provider_satisfies_protocol():
    assert isinstance(MockProvider(), AIProvider)


async def test_executor_passes_role_temperature_and_prompts():
    provider = MockProvider("analyst", "analysis")
    executor = ProviderExecutor({AgentId.ANALYST: provider})

    content = await executor(AgentId.ANALYST, "the prompt", "the system")

    assert content == "analysis"
    assert provider.calls == [("the prompt", "the system", 0.5)]


async def test_executor_temperature_override():
    provider = MockProvider("analyst")
    executor = ProviderExecutor({AgentId.ANALYST: provider}, temperatures={AgentId.ANALYST: 0.1})
    await executor(AgentId.ANALYST, "p", "s")
    assert provider.calls[0][2] == 0.1


async def test_executor_retries_then_succeeds(monkeypatch):
    sleeps: list[float] = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    monkeypatch.setattr("council.executor.asyncio.sleep", fake_sleep)
    provider = MockProvider("ethicist")
    provider.generate = AsyncMock(side_effect=[  # type: ignore[method-assign]
        ProviderError("ethicist", "rate limited"),
        ProviderError("ethicist", "rate limited"),
        _completion("finally"),
    ])
    executor = ProviderExecutor({AgentId.ETHICIST: provider}, max_retries=2, backoff_base_sec=1.0)

    assert await executor(AgentId.ETHICIST, "p", "s") == "finally"
    assert provider.generate.await_count == 3
    assert sleeps == [1.0, 2.0]


async def test_executor_returns_placeholder_after_exhausting_retries(monkeypatch, caplog):
    monkeypatch.setattr("council.executor.asyncio.sleep", AsyncMock())
    provider = MockProvider("analyst")
    provider.generate = AsyncMock(side_effect=ProviderError("analyst", "500"))  # type: ignore[method-assign]
    executor = ProviderExecutor({AgentId.ANALYST: provider}, max_retries=2)

    with caplog.at_level(logging.WARNING):
        content = await executor(AgentId.ANALYST, "p", "s")

    assert content == failure_placeholder(AgentId.ANALYST)
    assert provider.generate.await_count == 3
    assert any("failed after 2 retries" in msg for msg in caplog.messages)


async def test_executor_placeholder_for_agent_without_provider():
    executor = ProviderExecutor({})
    assert await executor(AgentId.STRATEGIST, "p", "s") == failure_placeholder(AgentId.STRATEGIST)


async def test_executor_does_not_swallow_unexpected_errors():
    provider = MockProvider("analyst")
    provider.generate = AsyncMock(side_effect=KeyError("bug"))  # type: ignore[method-assign]
    executor = ProviderExecutor({AgentId.ANALYST: provider})
    with pytest.raises(KeyError):
        await executor(AgentId.ANALYST, "p", "s")


async def test_executor_accumulates_tokens():
    provider = MockProvider("analyst")
    provider.generate = AsyncMock(side_effect=[_completion(tokens=7), _completion(tokens=None), _completion(tokens=3)])  # type: ignore[method-assign]
    executor = ProviderExecutor({AgentId.ANALYST: provider})
    assert executor.total_tokens is None

    for _ in range(3):
        await executor(AgentId.ANALYST, "p", "s")

    assert executor.total_tokens == 10


def test_negative_retries_rejected():
    with pytest.raises(ValueError):
        ProviderExecutor({}, max_retries=-1)


async def test_track_tokens_scopes_counts_to_block():
    executor = ProviderExecutor({AgentId.ANALYST: MockProvider("gemini")})
    await executor(AgentId.ANALYST, "before", "s")

    with track_tokens() as usage:
        assert usage.total is None
        await executor(AgentId.ANALYST, "inside", "s")

    await executor(AgentId.ANALYST, "after", "s")
    assert usage.total == 10
    assert executor.total_tokens == 30
