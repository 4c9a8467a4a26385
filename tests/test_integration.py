"""Integration tests: real API calls, no mocks. Requires .env with every council key."""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

load_dotenv()

_COUNCIL_KEYS = ["PERPLEXITY_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"]
_AVAILABLE_KEYS = [k for k in _COUNCIL_KEYS if os.environ.get(k, "").strip()]

pytestmark = pytest.mark.integration

if len(_AVAILABLE_KEYS) < len(_COUNCIL_KEYS):
    pytestmark = pytest.mark.skip(reason=f"Need all {len(_COUNCIL_KEYS)} council keys, found {len(_AVAILABLE_KEYS)}")


async def test_full_parallel_council(tmp_path: Path):
    """Run a real parallel council session and save it, verify no crash."""
    from config.config_loader import load_config
    from council.cli import _build_executor, _build_providers
    from council.executor import is_failure_placeholder
    from council.orchestrator import StrategyConfig, orchestrate
    from council.output import save_to_file

    config = load_config()
    providers = _build_providers(config)
    assert len(providers) == 4, f"Need 4 providers, got {len(providers)}"

    executor = _build_executor(config, providers)
    question = "Should a small team use a monorepo or separate repos for a Python microservices project?"

    result = await orchestrate(question, [], StrategyConfig.for_strategy("parallel"), executor)

    assert len(result.rounds) == 1
    assert len(result.rounds[0].responses) == 4
    for resp in result.rounds[0].responses:
        assert resp.content
        assert not is_failure_placeholder(resp.content, resp.agent_id), f"{resp.agent_id} failed"
    assert result.final_consensus
    assert executor.total_tokens

    saved = save_to_file(result, question, tmp_path / "output")
    content = saved.read_text(encoding="utf-8")
    assert "AI Council" in content
    assert "**Strategy:** parallel" in content
    assert len(content) > 500
