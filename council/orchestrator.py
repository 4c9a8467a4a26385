"""Strategy orchestration: pick and drive round executors, then synthesize."""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import assert_never

from council.errors import ConfigurationError
from council.executor import AgentExecutor, track_tokens
from council.models import (
    Context,
    Message,
    OrchestrationMetadata,
    OrchestrationResult,
    Round,
    Strategy,
)
from council.roles import COUNCIL, AgentId, in_priority_order, resolve_council_agent
from council.rounds import (
    run_debate_round,
    run_parallel_round,
    run_sequential_round,
    run_voting_round,
)
from council.synthesis import synthesize

logger = logging.getLogger(__name__)

_DEFAULT_MAX_ROUNDS: dict[Strategy, int] = {
    Strategy.PARALLEL: 1,
    Strategy.SEQUENTIAL: 1,
    Strategy.DEBATE: 2,
    Strategy.VOTING: 2,
    Strategy.CONSENSUS: 3,
}

_CRITIQUE_BY_DEFAULT = frozenset({Strategy.DEBATE, Strategy.CONSENSUS})


@dataclass
class StrategyConfig:
    strategy: Strategy | str
    max_rounds: int | None = None         # None -> strategy default
    allow_critique: bool = False
    agents: Sequence[AgentId | str] = field(default_factory=lambda: list(COUNCIL))

    @classmethod
    def for_strategy(cls, strategy: Strategy | str) -> "StrategyConfig":
        """Built-in preset: default round count, critique on for debate and consensus."""
        resolved = resolve_strategy(strategy)
        return cls(
            strategy=resolved,
            max_rounds=_DEFAULT_MAX_ROUNDS[resolved],
            allow_critique=resolved in _CRITIQUE_BY_DEFAULT,
        )


def resolve_strategy(strategy: Strategy | str) -> Strategy:
    try:
        return Strategy(strategy)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown strategy: {strategy!r}") from exc


def _resolve_agents(agents: Sequence[AgentId | str]) -> list[AgentId]:
    resolved = [resolve_council_agent(a) for a in agents]
    if not resolved:
        raise ConfigurationError("At least one council agent is required")
    if len(set(resolved)) != len(resolved):
        raise ConfigurationError(f"Duplicate agents in strategy config: {[a.value for a in resolved]}")
    return in_priority_order(resolved)


def should_stop(rnd: Round) -> bool:
    """Consensus predicate for the consensus strategy.

    Placeholder policy: converged once the second round is in. Round content
    is not inspected.
    """
    return rnd.number >= 2


async def orchestrate(
    user_query: str,
    history: Sequence[Message],
    config: StrategyConfig,
    executor: AgentExecutor,
    on_round_complete: Callable[[Round], None] | None = None,
) -> OrchestrationResult:
    """Run one council session and return the synthesized result.

    Args:
        user_query: The question for the council. Must be non-empty.
        history: Earlier conversation turns, oldest first.
        config: Strategy and its limits.
        executor: Async callable ``(agent_id, prompt, system_prompt) -> str``.
        on_round_complete: Optional callback invoked after each round.

    Returns:
        OrchestrationResult with every round and the final consensus.

    Raises:
        ConfigurationError: Unknown strategy or agent, or invalid limits.
            Raised before any agent is called.
        SynthesisError: The chair could not produce the final answer.
    """
    strategy = resolve_strategy(config.strategy)
    agents = _resolve_agents(config.agents)
    max_rounds = config.max_rounds if config.max_rounds is not None else _DEFAULT_MAX_ROUNDS[strategy]
    if max_rounds < 1:
        raise ConfigurationError(f"max_rounds must be >= 1, got {max_rounds}")
    if not user_query or not user_query.strip():
        raise ConfigurationError("User query must be non-empty")

    start = time.monotonic()
    context = Context(user_query=user_query, conversation_history=list(history))

    def record(rnd: Round) -> None:
        context.add_round(rnd)
        logger.info("Round %d complete: %d responses", rnd.number, len(rnd.responses))
        if on_round_complete:
            on_round_complete(rnd)

    logger.info("Starting %s orchestration with %d agents", strategy, len(agents))

    with track_tokens() as usage:
        consensus_reached = await _run_strategy(
            strategy, agents, context, executor, max_rounds, config.allow_critique, record,
        )
        rounds = list(context.previous_rounds)
        final_consensus = await synthesize(rounds, executor)

    return OrchestrationResult(
        strategy=strategy,
        rounds=rounds,
        final_consensus=final_consensus,
        participating_agents=agents,
        metadata=OrchestrationMetadata(
            duration_sec=time.monotonic() - start,
            consensus_reached=consensus_reached,
            total_tokens=usage.total,
        ),
    )


async def _run_strategy(
    strategy: Strategy,
    agents: list[AgentId],
    context: Context,
    executor: AgentExecutor,
    max_rounds: int,
    allow_critique: bool,
    record: Callable[[Round], None],
) -> bool:
    """Drive the rounds of one strategy. Returns whether consensus was reached."""
    match strategy:
        case Strategy.PARALLEL:
            record(await run_parallel_round(agents, context, executor))

        case Strategy.SEQUENTIAL:
            record(await run_sequential_round(agents, context, executor))

        case Strategy.DEBATE:
            for round_number in range(1, max_rounds + 1):
                record(await run_debate_round(
                    agents, context, executor, round_number,
                    critique=allow_critique and round_number < max_rounds,
                ))

        case Strategy.VOTING:
            initial = await run_parallel_round(agents, context, executor)
            record(initial)
            record(await run_voting_round(agents, initial, executor))

        case Strategy.CONSENSUS:
            for round_number in range(1, max_rounds + 1):
                rnd = await run_debate_round(
                    agents, context, executor, round_number,
                    critique=allow_critique and round_number < max_rounds,
                )
                record(rnd)
                if round_number > 1 and should_stop(rnd):
                    logger.info("Consensus predicate satisfied after round %d", round_number)
                    return True
            return False

        case _:
            assert_never(strategy)

    return True
