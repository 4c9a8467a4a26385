"""Load settings.yaml into typed dataclasses. Checks API keys at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from council.errors import ConfigurationError
from council.models import Strategy
from council.roles import AgentId, resolve_council_agent

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

SUPPORTED_SDKS = frozenset({"anthropic", "openai", "gemini"})


@dataclass
class AgentConfig:
    name: str               # council seat, e.g. "analyst"
    sdk: str
    model: str
    api_key_env: str
    timeout_sec: int
    max_tokens: int
    base_url: str | None = None
    temperature: float | None = None   # None -> role default


@dataclass
class DefaultsConfig:
    strategy: str
    output_dir: Path
    max_rounds: dict[str, int] = field(default_factory=dict)
    allow_critique: bool = True
    max_retries: int = 2
    backoff_base_sec: float = 1.0


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    agents: dict[AgentId, AgentConfig]
    available_agents: set[AgentId] = field(default_factory=set)


def _parse_defaults(raw: dict) -> DefaultsConfig:
    strategy = str(raw["strategy"])
    try:
        Strategy(strategy)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown default strategy: {strategy!r}") from exc

    max_rounds = {str(k): int(v) for k, v in (raw.get("max_rounds") or {}).items()}
    for name, value in max_rounds.items():
        try:
            Strategy(name)
        except ValueError as exc:
            raise ConfigurationError(f"max_rounds given for unknown strategy: {name!r}") from exc
        if value < 1:
            raise ConfigurationError(f"max_rounds for {name} must be >= 1, got {value}")

    return DefaultsConfig(
        strategy=strategy,
        output_dir=Path(raw["output_dir"]),
        max_rounds=max_rounds,
        allow_critique=bool(raw.get("allow_critique", True)),
        max_retries=int(raw.get("max_retries", 2)),
        backoff_base_sec=float(raw.get("backoff_base_sec", 1.0)),
    )


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if the settings file is missing, and
    ConfigurationError for unknown strategies, agents or SDKs. Missing API
    keys are logged, not raised; callers check available_agents.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults = _parse_defaults(raw["defaults"])

    agents: dict[AgentId, AgentConfig] = {}
    available_agents: set[AgentId] = set()

    for agent_name, agent_raw in raw["agents"].items():
        agent_id = resolve_council_agent(agent_name)
        sdk = str(agent_raw["sdk"])
        if sdk not in SUPPORTED_SDKS:
            raise ConfigurationError(f"Agent {agent_name}: unsupported sdk {sdk!r}")

        temperature = agent_raw.get("temperature")
        agents[agent_id] = AgentConfig(
            name=agent_id.value,
            sdk=sdk,
            model=agent_raw["model"],
            api_key_env=agent_raw["api_key_env"],
            timeout_sec=int(agent_raw["timeout_sec"]),
            max_tokens=int(agent_raw["max_tokens"]),
            base_url=agent_raw.get("base_url"),
            temperature=float(temperature) if temperature is not None else None,
        )

        api_key = os.environ.get(agent_raw["api_key_env"], "").strip()
        if api_key:
            available_agents.add(agent_id)
            logger.info("Agent available: %s (%s)", agent_id, agent_raw["model"])
        else:
            logger.info(
                "Agent skipped (no API key): %s, set %s in .env",
                agent_id,
                agent_raw["api_key_env"],
            )

    return AppConfig(
        defaults=defaults,
        agents=agents,
        available_agents=available_agents,
    )
