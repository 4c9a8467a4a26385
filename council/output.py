"""Rich console output and markdown / JSON export of council results."""

import json
import logging
import re
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from council.models import AgentResponse, OrchestrationResult, Round, Strategy
from council.roles import CHAIR, AgentId, get_role

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def _response_preview(response: AgentResponse, words: int = 50) -> str:
    """Return first N words of a response."""
    all_words = response.content.split()
    preview = " ".join(all_words[:words])
    if len(all_words) > words:
        preview += "..."
    return preview


def _round_label(strategy: Strategy, rnd: Round) -> str:
    if strategy is Strategy.VOTING and rnd.number == 2:
        return "Votes"
    if strategy in (Strategy.PARALLEL, Strategy.VOTING) or rnd.number == 1:
        return "Initial Responses"
    return "Refinement"


def print_round_summary(rnd: Round) -> None:
    """Print a brief summary of one round's responses and critiques."""
    console.print(Rule(f"[bold cyan]Round {rnd.number} Summary[/bold cyan]"))
    for resp in rnd.responses:
        console.print(
            Panel(
                _response_preview(resp),
                title=f"[bold]{resp.agent_id}[/bold] ({get_role(resp.agent_id).role})",
                border_style="dim",
            )
        )
    for critique in rnd.critiques or ():
        console.print(
            Text(f"{critique.from_agent} on {critique.to_agent}: ", style="bold yellow")
            + Text(" ".join(critique.critique.split()[:40]), style="dim")
        )


def print_synthesis(result: OrchestrationResult) -> None:
    """Print the final consensus to the console using Rich markdown."""
    console.print(Rule("[bold green]Council Synthesis[/bold green]"))
    console.print(
        Text(
            f"Chair: {CHAIR} | "
            f"Strategy: {result.strategy} | "
            f"Rounds: {len(result.rounds)} | "
            f"Duration: {result.metadata.duration_sec:.1f}s | "
            f"Consensus reached: {'yes' if result.metadata.consensus_reached else 'no'}",
            style="dim",
        )
    )
    console.print(Markdown(result.final_consensus))


def save_to_file(
    result: OrchestrationResult,
    question: str,
    output_dir: Path,
    models: Mapping[AgentId, str] | None = None,
) -> Path:
    """Save the full council transcript as a markdown file.

    Args:
        result: The completed OrchestrationResult.
        question: The user query the council answered.
        output_dir: Directory to save the file in.
        models: Optional model string per agent, listed in the header.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = output_dir / f"{timestamp}_{_slug(question)}.md"

    lines: list[str] = [
        f"# AI Council: {question[:80]}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Strategy:** {result.strategy}",
        f"**Council:** {', '.join(a.value for a in result.participating_agents)}",
        f"**Chair:** {CHAIR}",
        f"**Rounds:** {len(result.rounds)}",
        f"**Duration:** {result.metadata.duration_sec:.1f}s",
        f"**Consensus reached:** {'yes' if result.metadata.consensus_reached else 'no'}",
    ]
    model_labels = [f"{a} ({models[a]})" for a in result.participating_agents if a in (models or {})]
    if model_labels:
        lines.append(f"**Models:** {', '.join(model_labels)}")
    if result.metadata.total_tokens is not None:
        lines.append(f"**Tokens:** {result.metadata.total_tokens}")
    lines += ["", "---", ""]

    for rnd in result.rounds:
        lines.append(f"## Round {rnd.number}: {_round_label(result.strategy, rnd)}")
        lines.append("")
        for resp in rnd.responses:
            lines.append(f"### {get_role(resp.agent_id).role} ({resp.agent_id})")
            lines.append("")
            lines.append(resp.content)
            lines.append("")
        if rnd.critiques:
            lines.append(f"### Critiques (round {rnd.number})")
            lines.append("")
            for critique in rnd.critiques:
                lines.append(f"**{critique.from_agent} on {critique.to_agent}:**")
                lines.append("")
                lines.append(critique.critique)
                lines.append("")

    lines += [
        f"## Synthesis (by {CHAIR})",
        "",
        result.final_consensus,
        "",
    ]

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Transcript saved to: %s", filepath)
    return filepath


def save_json(result: OrchestrationResult, path: Path) -> Path:
    """Write the serialized result next to the markdown transcript."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Result JSON saved to: %s", path)
    return path
