"""Provider health checks: ping each council seat's API before a session."""

import asyncio
import logging

from council.providers.base import AIProvider
from council.roles import AgentId

logger = logging.getLogger(__name__)

_PING_PROMPT = "Reply with the word OK only."
_PING_SYSTEM_PROMPT = "You are a connectivity check."
_TIMEOUT_SEC = 15.0


async def _check_one(agent_id: AgentId, provider: AIProvider) -> tuple[AgentId, bool, str]:
    """Ping a single provider. Returns (agent_id, ok, error_message)."""
    try:
        await asyncio.wait_for(
            provider.generate(_PING_PROMPT, _PING_SYSTEM_PROMPT, 0.0),
            timeout=_TIMEOUT_SEC,
        )
        return agent_id, True, ""
    except Exception as exc:
        logger.debug("Health check failed for %s: %s", agent_id, exc)
        return agent_id, False, str(exc)


async def run_health_checks(
    providers: dict[AgentId, AIProvider],
) -> dict[AgentId, tuple[bool, str]]:
    """Ping all providers in parallel.

    Returns:
        Dict mapping agent id -> (ok, error_message).
        error_message is "" when ok is True.
    """
    results = await asyncio.gather(*(_check_one(a, p) for a, p in providers.items()))
    return {agent_id: (ok, err) for agent_id, ok, err in results}
