"""Round executors: each runs one round of agent calls and returns a Round."""

import asyncio
import logging
import time

from council.executor import AgentExecutor
from council.models import AgentCritique, AgentResponse, Context, Round
from council.prompts import (
    build_ballot,
    build_critique_prompt,
    build_debate_directive,
    build_turn_prompt,
)
from council.roles import AgentId, get_role, next_in_order

logger = logging.getLogger(__name__)


async def _respond(
    executor: AgentExecutor,
    agent_id: AgentId,
    prompt: str,
    system_prompt: str,
) -> AgentResponse:
    content = await executor(agent_id, prompt, system_prompt)
    return AgentResponse(agent_id=agent_id, content=content, timestamp=time.time())


async def run_parallel_round(
    agents: list[AgentId],
    context: Context,
    executor: AgentExecutor,
    round_number: int = 1,
) -> Round:
    """All agents answer the same initial prompt concurrently.

    No agent sees another's output. Responses come back in the order of
    ``agents`` (priority order) whatever order the calls finish in.
    """
    prompt = build_turn_prompt(context.user_query, [])
    logger.info("Round %d: %d agents in parallel", round_number, len(agents))

    responses = await asyncio.gather(
        *(_respond(executor, a, prompt, get_role(a).system_prompt) for a in agents)
    )
    return Round(number=round_number, responses=tuple(responses))


async def run_sequential_round(
    agents: list[AgentId],
    context: Context,
    executor: AgentExecutor,
    round_number: int = 1,
) -> Round:
    """Agents answer one at a time; each prompt carries every earlier answer."""
    logger.info("Round %d: %d agents in sequence", round_number, len(agents))
    responses: list[AgentResponse] = []
    for agent_id in agents:
        prompt = build_turn_prompt(context.user_query, responses)
        responses.append(await _respond(executor, agent_id, prompt, get_role(agent_id).system_prompt))
    return Round(number=round_number, responses=tuple(responses))


async def generate_critiques(
    agents: list[AgentId],
    responses: list[AgentResponse],
    executor: AgentExecutor,
) -> list[AgentCritique]:
    """Each response is critiqued by the next agent in priority order, wrapping."""
    critiques: list[AgentCritique] = []
    for resp in responses:
        critic = next_in_order(resp.agent_id, agents)
        if critic == resp.agent_id:
            # single-agent council, nobody else to ask
            continue
        prompt = build_critique_prompt(resp.agent_id, resp.content)
        text = await executor(critic, prompt, get_role(critic).system_prompt)
        critiques.append(AgentCritique(from_agent=critic, to_agent=resp.agent_id, critique=text))
    return critiques


async def run_debate_round(
    agents: list[AgentId],
    context: Context,
    executor: AgentExecutor,
    round_number: int,
    critique: bool = False,
) -> Round:
    """Sequential round that also sees the full text of all earlier rounds.

    Args:
        agents: Participants in priority order.
        context: Orchestration context; previous_rounds is read, not changed.
        executor: Agent executor capability.
        round_number: Number of the round being run.
        critique: Run a critique pass after the responses. Callers pass
            False for the last configured round.

    Returns:
        The finished Round, with critiques attached when requested.
    """
    logger.info(
        "Round %d: debate over %d earlier rounds%s",
        round_number, len(context.previous_rounds), " with critique" if critique else "",
    )
    responses: list[AgentResponse] = []
    for agent_id in agents:
        system_prompt = get_role(agent_id).system_prompt
        if round_number > 1 or responses:
            system_prompt += "\n\n" + build_debate_directive(round_number, context.previous_rounds)
        prompt = build_turn_prompt(context.user_query, responses, round_number)
        responses.append(await _respond(executor, agent_id, prompt, system_prompt))

    critiques = None
    if critique:
        critiques = tuple(await generate_critiques(agents, responses, executor))

    return Round(number=round_number, responses=tuple(responses), critiques=critiques)


async def run_voting_round(
    agents: list[AgentId],
    candidates: Round,
    executor: AgentExecutor,
    round_number: int = 2,
) -> Round:
    """Every agent gets the same ballot of the candidate round's responses.

    Calls go one at a time. Votes are kept as free text.
    """
    ballot = build_ballot(candidates.responses)
    logger.info("Round %d: voting on %d responses", round_number, len(candidates.responses))
    votes: list[AgentResponse] = []
    for agent_id in agents:
        votes.append(await _respond(executor, agent_id, ballot, get_role(agent_id).system_prompt))
    return Round(number=round_number, responses=tuple(votes))
