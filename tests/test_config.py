"""Tests for config/config_loader.py."""

from pathlib import Path

import pytest
import yaml

from config.config_loader import AgentConfig, AppConfig, load_config
from council.errors import ConfigurationError
from council.roles import AgentId


def _settings() -> dict:
    return {
        "defaults": {
            "strategy": "debate",
            "output_dir": "./output",
            "allow_critique": False,
            "max_rounds": {"debate": 3, "consensus": 4},
            "max_retries": 1,
            "backoff_base_sec": 0.5,
        },
        "agents": {
            "strategist": {
                "sdk": "openai",
                "model": "gpt-4o",
                "api_key_env": "TEST_STRATEGIST_KEY",
                "timeout_sec": 120,
                "max_tokens": 4096,
                "temperature": 0.9,
            },
            "fact-checker": {
                "sdk": "openai",
                "model": "sonar-pro",
                "base_url": "https://api.perplexity.ai",
                "api_key_env": "TEST_FACT_KEY",
                "timeout_sec": 60,
                "max_tokens": 2048,
            },
        },
    }


def _write(tmp_path: Path, settings: dict) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump(settings), encoding="utf-8")
    return path


@pytest.fixture
def minimal_settings(tmp_path: Path) -> Path:
    return _write(tmp_path, _settings())


def test_load_config_returns_app_config(minimal_settings):
    assert isinstance(load_config(minimal_settings), AppConfig)


def test_load_config_defaults(minimal_settings):
    config = load_config(minimal_settings)
    assert config.defaults.strategy == "debate"
    assert config.defaults.allow_critique is False
    assert config.defaults.max_rounds == {"debate": 3, "consensus": 4}
    assert config.defaults.max_retries == 1
    assert config.defaults.backoff_base_sec == 0.5
    assert isinstance(config.defaults.output_dir, Path)


def test_load_config_agents_keyed_by_agent_id(minimal_settings):
    config = load_config(minimal_settings)
    assert set(config.agents) == {AgentId.STRATEGIST, AgentId.FACT_CHECKER}
    strategist = config.agents[AgentId.STRATEGIST]
    assert isinstance(strategist, AgentConfig)
    assert strategist.temperature == 0.9
    assert strategist.base_url is None
    assert config.agents[AgentId.FACT_CHECKER].base_url == "https://api.perplexity.ai"
    assert config.agents[AgentId.FACT_CHECKER].temperature is None


def test_load_config_available_agents_with_key(minimal_settings, monkeypatch):
    monkeypatch.setenv("TEST_STRATEGIST_KEY", "sk-test-key")
    monkeypatch.delenv("TEST_FACT_KEY", raising=False)
    config = load_config(minimal_settings)
    assert config.available_agents == {AgentId.STRATEGIST}


def test_load_config_blank_key_is_unavailable(minimal_settings, monkeypatch):
    monkeypatch.setenv("TEST_STRATEGIST_KEY", "   ")
    config = load_config(minimal_settings)
    assert AgentId.STRATEGIST not in config.available_agents


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config(Path("/nonexistent/settings.yaml"))


def test_load_config_unknown_agent(tmp_path: Path):
    settings = _settings()
    settings["agents"]["oracle"] = dict(settings["agents"]["strategist"])
    with pytest.raises(ConfigurationError, match="Unknown agent"):
        load_config(_write(tmp_path, settings))


def test_load_config_unknown_sdk(tmp_path: Path):
    settings = _settings()
    settings["agents"]["strategist"]["sdk"] = "carrier-pigeon"
    with pytest.raises(ConfigurationError, match="unsupported sdk"):
        load_config(_write(tmp_path, settings))


def test_load_config_unknown_default_strategy(tmp_path: Path):
    settings = _settings()
    settings["defaults"]["strategy"] = "brainstorm"
    with pytest.raises(ConfigurationError, match="brainstorm"):
        load_config(_write(tmp_path, settings))


def test_load_config_rejects_zero_max_rounds(tmp_path: Path):
    settings = _settings()
    settings["defaults"]["max_rounds"] = {"debate": 0}
    with pytest.raises(ConfigurationError, match=">= 1"):
        load_config(_write(tmp_path, settings))


def test_load_config_optional_defaults(tmp_path: Path):
    settings = _settings()
    settings["defaults"] = {"strategy": "parallel", "output_dir": "./out"}
    config = load_config(_write(tmp_path, settings))
    assert config.defaults.max_rounds == {}
    assert config.defaults.allow_critique is True
    assert config.defaults.max_retries == 2


def test_shipped_settings_cover_the_council():
    config = load_config()
    assert set(config.agents) == {
        AgentId.FACT_CHECKER, AgentId.ANALYST, AgentId.STRATEGIST, AgentId.ETHICIST,
    }
