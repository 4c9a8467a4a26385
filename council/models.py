"""Dataclasses for the council orchestration pipeline.

Rounds and their parts are frozen once built; Context is the only mutable
piece and only ever grows.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from council.roles import AgentId


class Strategy(str, Enum):
    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"
    DEBATE = "debate"
    VOTING = "voting"
    CONSENSUS = "consensus"

    def __str__(self) -> str:
        return self.value


@dataclass
class Message:
    """One prior turn of the conversation, from a council member or the user."""

    agent_id: AgentId
    content: str
    timestamp: float
    round_number: int | None = None


@dataclass
class Completion:
    provider: str          # "anthropic", "openai", "gemini"
    model: str             # actual model string used
    content: str
    latency_sec: float
    token_count: int | None


@dataclass(frozen=True)
class AgentResponse:
    agent_id: AgentId
    content: str
    timestamp: float
    confidence: float | None = None
    reasoning: str | None = None


@dataclass(frozen=True)
class AgentCritique:
    from_agent: AgentId
    to_agent: AgentId
    critique: str
    suggestion: str | None = None

    def __post_init__(self) -> None:
        if self.from_agent == self.to_agent:
            raise ValueError(f"Agent {self.from_agent} cannot critique itself")


@dataclass(frozen=True)
class Round:
    number: int
    responses: tuple[AgentResponse, ...] = ()
    critiques: tuple[AgentCritique, ...] | None = None
    consensus: str | None = None

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"Round numbers start at 1, got {self.number}")
        agents = [r.agent_id for r in self.responses]
        if len(agents) != len(set(agents)):
            raise ValueError(f"Duplicate agent responses in round {self.number}")
        for critique in self.critiques or ():
            if critique.to_agent not in agents:
                raise ValueError(
                    f"Critique targets {critique.to_agent}, which did not respond in round {self.number}"
                )


@dataclass
class Context:
    user_query: str
    conversation_history: list[Message] = field(default_factory=list)
    previous_rounds: list[Round] = field(default_factory=list)
    shared_context: dict[str, Any] = field(default_factory=dict)

    def add_round(self, rnd: Round) -> None:
        """Append a finished round. Numbers must continue the sequence from 1."""
        expected = len(self.previous_rounds) + 1
        if rnd.number != expected:
            raise ValueError(f"Expected round {expected}, got round {rnd.number}")
        self.previous_rounds.append(rnd)


@dataclass
class OrchestrationMetadata:
    duration_sec: float
    consensus_reached: bool
    total_tokens: int | None = None


@dataclass
class OrchestrationResult:
    strategy: Strategy
    rounds: list[Round]
    final_consensus: str
    participating_agents: list[AgentId]
    metadata: OrchestrationMetadata

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-ready form. List order carries meaning and is kept."""
        return {
            "strategy": self.strategy.value,
            "rounds": [_round_to_dict(rnd) for rnd in self.rounds],
            "final_consensus": self.final_consensus,
            "participating_agents": [a.value for a in self.participating_agents],
            "metadata": {
                "duration_sec": self.metadata.duration_sec,
                "consensus_reached": self.metadata.consensus_reached,
                "total_tokens": self.metadata.total_tokens,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrchestrationResult":
        meta = data["metadata"]
        return cls(
            strategy=Strategy(data["strategy"]),
            rounds=[_round_from_dict(r) for r in data["rounds"]],
            final_consensus=data["final_consensus"],
            participating_agents=[AgentId(a) for a in data["participating_agents"]],
            metadata=OrchestrationMetadata(
                duration_sec=float(meta["duration_sec"]),
                consensus_reached=bool(meta["consensus_reached"]),
                total_tokens=meta.get("total_tokens"),
            ),
        )


def _round_to_dict(rnd: Round) -> dict[str, Any]:
    return {
        "number": rnd.number,
        "responses": [
            {
                "agent_id": r.agent_id.value,
                "content": r.content,
                "timestamp": r.timestamp,
                "confidence": r.confidence,
                "reasoning": r.reasoning,
            }
            for r in rnd.responses
        ],
        "critiques": None if rnd.critiques is None else [
            {
                "from_agent": c.from_agent.value,
                "to_agent": c.to_agent.value,
                "critique": c.critique,
                "suggestion": c.suggestion,
            }
            for c in rnd.critiques
        ],
        "consensus": rnd.consensus,
    }


def _round_from_dict(data: dict[str, Any]) -> Round:
    critiques = data.get("critiques")
    return Round(
        number=int(data["number"]),
        responses=tuple(
            AgentResponse(
                agent_id=AgentId(r["agent_id"]),
                content=r["content"],
                timestamp=float(r["timestamp"]),
                confidence=r.get("confidence"),
                reasoning=r.get("reasoning"),
            )
            for r in data["responses"]
        ),
        critiques=None if critiques is None else tuple(
            AgentCritique(
                from_agent=AgentId(c["from_agent"]),
                to_agent=AgentId(c["to_agent"]),
                critique=c["critique"],
                suggestion=c.get("suggestion"),
            )
            for c in critiques
        ),
        consensus=data.get("consensus"),
    )
