"""Final synthesis: flatten the round history and ask the chair for one answer."""

import logging

from council.errors import SynthesisError
from council.executor import AgentExecutor, is_failure_placeholder
from council.models import Round
from council.prompts import build_synthesis_directive
from council.roles import CHAIR, get_role

logger = logging.getLogger(__name__)


def _format_full_transcript(rounds: list[Round]) -> str:
    """Every response, round by round and in priority order, tagged by agent."""
    return "\n\n---\n\n".join(
        f"[{resp.agent_id.value.upper()}]:\n{resp.content}"
        for rnd in rounds
        for resp in rnd.responses
    )


async def synthesize(rounds: list[Round], executor: AgentExecutor) -> str:
    """Ask the chair to merge the whole debate into the final answer.

    Args:
        rounds: All completed rounds, oldest first.
        executor: Agent executor capability.

    Returns:
        The chair's raw output.

    Raises:
        SynthesisError: If the chair call raises, returns nothing, or returns
            the failure placeholder.
    """
    transcript = _format_full_transcript(rounds)
    directive = build_synthesis_directive(transcript)

    logger.info("Running synthesis via %s over %d rounds", CHAIR, len(rounds))

    try:
        content = await executor(CHAIR, directive, get_role(CHAIR).system_prompt)
    except Exception as exc:
        raise SynthesisError(CHAIR.value, f"Synthesis call failed: {exc}") from exc

    if not content or not content.strip():
        raise SynthesisError(CHAIR.value, "Chair returned empty content")
    if is_failure_placeholder(content, CHAIR):
        raise SynthesisError(CHAIR.value, "Chair failed after retries")

    return content
