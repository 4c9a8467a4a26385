"""Prompt text for council turns, debate rounds, critiques, ballots and synthesis.

Every function here is pure: the same arguments always render the same string.
"""

from collections.abc import Sequence

from council.models import AgentResponse, Round
from council.roles import AgentId

_TURN_CLOSING = "Provide your perspective based on your role and expertise."

_DEBATE_ROUND_DIRECTIVE = """This is ROUND {round_number} of the AI Council debate.

{previous_rounds_block}
In this round, you should:
1. Review what other agents have said
2. Build upon their insights
3. Identify any gaps or concerns
4. Provide your unique perspective
5. Challenge assumptions if needed (constructively)

Be collaborative but not afraid to disagree if you have good reasons."""

_CRITIQUE_TEMPLATE = """Review this response from {target_agent}:

"{response}"

Provide constructive critique focusing on:
1. Factual accuracy
2. Logical soundness
3. Completeness
4. Potential blind spots
5. Alternative perspectives

Be specific and helpful in your critique."""

_BALLOT_TEMPLATE = """Review these responses and vote for the best one:

{entries}
Evaluate based on:
- Accuracy and evidence
- Depth and insight
- Practicality
- Clarity

Provide your vote (1-{count}) and brief reasoning."""

_SYNTHESIS_TEMPLATE = """You are the Consensus Builder for the AI Council.

Here are all the agent responses:
{transcript}

Your task is to:
1. Synthesize the key insights from all agents
2. Resolve any contradictions
3. Identify areas of agreement
4. Acknowledge remaining uncertainties
5. Provide a unified, comprehensive response

Create a well-structured, conversational response that:
- Integrates factual accuracy (Fact Checker)
- Incorporates analytical depth (Analyst)
- Includes strategic recommendations (Strategist)
- Addresses ethical considerations (Ethicist)

Use markdown formatting for clarity. Write naturally as if explaining to a human."""


def build_turn_prompt(
    query: str,
    prior_responses: Sequence[AgentResponse],
    round_number: int | None = None,
) -> str:
    """Render the user-turn prompt for one agent.

    Args:
        query: The user's question, embedded verbatim.
        prior_responses: Responses already given in this round, in execution
            order. When empty, the context block is left out entirely.
        round_number: When greater than 1, adds a line naming the round.

    Returns:
        The prompt text.
    """
    prompt = f'USER QUERY: "{query}"\n\n'

    if prior_responses:
        prompt += "CONTEXT FROM OTHER AGENTS:\n"
        for resp in prior_responses:
            prompt += f"\n[{resp.agent_id.value}]:\n{resp.content}\n"
        prompt += "\n---\n\n"

    if round_number is not None and round_number > 1:
        prompt += f"This is round {round_number}. Build upon or refine the previous responses.\n\n"

    return prompt + _TURN_CLOSING


def format_previous_rounds(rounds: Sequence[Round]) -> str:
    """Full text of earlier rounds, oldest first."""
    return "\n\n---\n\n".join(
        f"Round {rnd.number}:\n"
        + "\n\n".join(f"[{r.agent_id.value}]: {r.content}" for r in rnd.responses)
        for rnd in rounds
    )


def build_debate_directive(round_number: int, previous_rounds: Sequence[Round]) -> str:
    """Directive appended to an agent's system prompt during debate rounds."""
    history = format_previous_rounds(previous_rounds)
    block = f"PREVIOUS ROUNDS:\n{history}\n" if history else ""
    return _DEBATE_ROUND_DIRECTIVE.format(round_number=round_number, previous_rounds_block=block)


def build_critique_prompt(target_agent: AgentId, response: str) -> str:
    return _CRITIQUE_TEMPLATE.format(target_agent=target_agent.value, response=response)


def build_ballot(responses: Sequence[AgentResponse]) -> str:
    """Number the candidate responses from 1, in the order given."""
    entries = "\n".join(
        f"{i}. {r.agent_id.value}:\n{r.content}\n" for i, r in enumerate(responses, start=1)
    )
    return _BALLOT_TEMPLATE.format(entries=entries, count=len(responses))


def build_synthesis_directive(transcript: str) -> str:
    return _SYNTHESIS_TEMPLATE.format(transcript=transcript)
