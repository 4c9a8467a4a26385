"""Shared pytest fixtures."""

import asyncio
from pathlib import Path

import pytest

from config.config_loader import AgentConfig, AppConfig, DefaultsConfig
from council.models import AgentResponse, Completion, Round
from council.roles import AgentId


class StubExecutor:
    """Test double agent executor that records every call.

    Args:
        replies: Optional per-agent reply. Agents without one answer
            "<agent> opinion". A list is consumed one item per call.
        delays: Optional per-agent sleep before answering, in seconds.
    """

    def __init__(
        self,
        replies: dict[AgentId, str | list[str]] | None = None,
        delays: dict[AgentId, float] | None = None,
        chair_reply: str = "## Council answer\nFinal synthesis.",
    ) -> None:
        self._replies = {k: list(v) if isinstance(v, list) else v for k, v in (replies or {}).items()}
        self._delays = delays or {}
        self._chair_reply = chair_reply
        self.calls: list[tuple[AgentId, str, str]] = []
        self.finished: list[AgentId] = []

    async def __call__(self, agent_id: AgentId, prompt: str, system_prompt: str) -> str:
        self.calls.append((agent_id, prompt, system_prompt))
        if prompt.startswith("You are the Consensus Builder"):
            return self._chair_reply
        if agent_id in self._delays:
            await asyncio.sleep(self._delays[agent_id])
        self.finished.append(agent_id)
        reply = self._replies.get(agent_id, f"{agent_id.value} opinion")
        if isinstance(reply, list):
            return reply.pop(0)
        return reply

    def prompts_for(self, agent_id: AgentId) -> list[str]:
        return [prompt for a, prompt, _ in self.calls if a == agent_id]

    @property
    def synthesis_calls(self) -> list[tuple[AgentId, str, str]]:
        return [c for c in self.calls if c[1].startswith("You are the Consensus Builder")]


class MockProvider:
    """Test double AIProvider returning a fixed completion."""

    def __init__(self, provider_name: str = "mock", response_content: str = "Mock response") -> None:
        self._name = provider_name
        self._response_content = response_content
        self.calls: list[tuple[str, str, float]] = []

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "mock-model"

    async def generate(self, prompt: str, system_prompt: str, temperature: float) -> Completion:
        self.calls.append((prompt, system_prompt, temperature))
        return Completion(
            provider=self._name,
            model="mock-model",
            content=self._response_content,
            latency_sec=0.1,
            token_count=10,
        )


@pytest.fixture
def stub_executor() -> StubExecutor:
    return StubExecutor()


@pytest.fixture
def sample_agent_config() -> AgentConfig:
    return AgentConfig(
        name="analyst",
        sdk="gemini",
        model="test-model-1",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
    )


@pytest.fixture
def sample_defaults_config(tmp_path: Path) -> DefaultsConfig:
    return DefaultsConfig(
        strategy="debate",
        output_dir=tmp_path / "output",
        max_rounds={"debate": 2, "consensus": 3},
        allow_critique=True,
        max_retries=2,
        backoff_base_sec=0.0,
    )


@pytest.fixture
def sample_app_config(sample_defaults_config: DefaultsConfig) -> AppConfig:
    strategist = AgentConfig(
        name="strategist",
        sdk="openai",
        model="gpt-4o",
        api_key_env="OPENAI_API_KEY",
        timeout_sec=60,
        max_tokens=4096,
        temperature=0.9,
    )
    return AppConfig(
        defaults=sample_defaults_config,
        agents={AgentId.STRATEGIST: strategist},
        available_agents={AgentId.STRATEGIST},
    )


@pytest.fixture
def sample_response() -> AgentResponse:
    return AgentResponse(
        agent_id=AgentId.ANALYST,
        content="Regulation should be risk-tiered rather than blanket.",
        timestamp=1_700_000_000.0,
    )


@pytest.fixture
def sample_round(sample_response: AgentResponse) -> Round:
    return Round(number=1, responses=(sample_response,))
