"""Click CLI: loads config, builds providers, runs the council, prints and saves."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AgentConfig, AppConfig, load_config
from council.errors import ConfigurationError, SynthesisError
from council.executor import ProviderExecutor
from council.healthcheck import run_health_checks
from council.models import OrchestrationResult, Round, Strategy
from council.orchestrator import StrategyConfig, orchestrate, resolve_strategy
from council.output import print_round_summary, print_synthesis, save_json, save_to_file
from council.providers.anthropic import AnthropicProvider
from council.providers.base import AIProvider
from council.providers.gemini import GeminiProvider
from council.providers.openai_provider import OpenAIProvider
from council.roles import CHAIR, AgentId

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

PROVIDER_CLASSES: dict[str, type] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _build_providers(config: AppConfig) -> dict[AgentId, AIProvider]:
    """Build a provider for every agent that has an API key. Keyed by agent."""
    providers: dict[AgentId, AIProvider] = {}
    for agent_id in config.available_agents:
        agent_cfg: AgentConfig = config.agents[agent_id]
        try:
            providers[agent_id] = PROVIDER_CLASSES[agent_cfg.sdk](agent_cfg)
        except Exception as exc:
            logger.warning("Failed to instantiate provider for '%s': %s", agent_id, exc)
    return providers


def _build_executor(config: AppConfig, providers: dict[AgentId, AIProvider]) -> ProviderExecutor:
    temperatures = {
        agent_id: cfg.temperature
        for agent_id, cfg in config.agents.items()
        if cfg.temperature is not None
    }
    return ProviderExecutor(
        providers,
        max_retries=config.defaults.max_retries,
        backoff_base_sec=config.defaults.backoff_base_sec,
        temperatures=temperatures,
    )


def _build_strategy_config(
    config: AppConfig,
    strategy_arg: str | None,
    rounds_arg: int | None,
    critique_arg: bool | None,
) -> StrategyConfig:
    """CLI flag > settings.yaml > built-in preset."""
    strategy = resolve_strategy(strategy_arg or config.defaults.strategy)
    strategy_config = StrategyConfig.for_strategy(strategy)

    if strategy.value in config.defaults.max_rounds:
        strategy_config.max_rounds = config.defaults.max_rounds[strategy.value]
    if rounds_arg is not None:
        if strategy not in (Strategy.DEBATE, Strategy.CONSENSUS):
            logger.warning("--rounds has no effect on the %s strategy", strategy)
        strategy_config.max_rounds = rounds_arg

    if strategy in (Strategy.DEBATE, Strategy.CONSENSUS):
        strategy_config.allow_critique = config.defaults.allow_critique
    if critique_arg is not None:
        strategy_config.allow_critique = critique_arg
    return strategy_config


def _check_and_filter_providers(providers: dict[AgentId, AIProvider]) -> dict[AgentId, AIProvider]:
    """Run health checks, print results, and ask the user what to do on failures.

    Returns the filtered dict of working providers. Exits if the user
    declines to continue or the chair fails.
    """
    console.print("\n[bold]Checking providers...[/bold]")
    results = asyncio.run(run_health_checks(providers))

    failed: list[AgentId] = []
    for agent_id in sorted(results, key=lambda a: a.value):
        ok, err = results[agent_id]
        if ok:
            console.print(f"  [green]OK  [/green] {agent_id} ({providers[agent_id].model_string()})")
        else:
            short_err = err.splitlines()[0][:120] if err else "unknown error"
            console.print(f"  [red]FAIL[/red] {agent_id} ({providers[agent_id].model_string()}): {short_err}")
            failed.append(agent_id)

    if not failed:
        console.print()
        return providers

    if CHAIR in failed:
        console.print(f"\n[bold red]Error:[/bold red] The chair ({CHAIR}) failed its health check.")
        sys.exit(1)

    working = {a: p for a, p in providers.items() if a not in failed}
    console.print(
        f"\n[yellow]{len(failed)} agent(s) failed:[/yellow] {', '.join(a.value for a in failed)}"
    )
    console.print("Failed agents will appear in the transcript as error placeholders.")

    if not click.confirm("Continue without them?", default=True):
        sys.exit(0)

    console.print()
    return working


async def _run_council(
    question: str,
    strategy_config: StrategyConfig,
    executor: ProviderExecutor,
) -> OrchestrationResult:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Running {strategy_config.strategy} council...", total=None)

        def on_round_complete(rnd: Round) -> None:
            progress.print(f"[green]OK[/green] Round {rnd.number} complete ({len(rnd.responses)} responses)")
            progress.update(task, description=f"Round {rnd.number} done, continuing...")

        result = await orchestrate(
            question,
            [],
            strategy_config,
            executor,
            on_round_complete=on_round_complete,
        )
    return result


@click.command()
@click.argument("question", required=False)
@click.option("--file", "question_file", type=click.Path(exists=True), help="Read question from a text file")
@click.option("--strategy", default=None,
              type=click.Choice([s.value for s in Strategy]),
              help="Orchestration strategy (default: from config)")
@click.option("--rounds", default=None, type=int, help="Max rounds for debate / consensus (default: from config)")
@click.option("--critique/--no-critique", default=None, help="Enable the critique pass between debate rounds")
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.option("--json", "save_json_flag", is_flag=True, help="Also save the result as JSON")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--skip-health-check", is_flag=True, default=False,
              help="Skip the API connectivity check at startup")
def main(
    question: str | None,
    question_file: str | None,
    strategy: str | None,
    rounds: int | None,
    critique: bool | None,
    output_path: str | None,
    save_json_flag: bool,
    verbose: bool,
    skip_health_check: bool,
) -> None:
    """AI Council -- four agents, one synthesized answer.

    \b
    Examples:
      python -m council.cli "Should we regulate AI development?"
      python -m council.cli "Best first programming language?" --strategy voting
      python -m council.cli --file question.md --strategy consensus --rounds 3
      python -m council.cli "Monorepo or polyrepo?" --strategy debate --no-critique --json
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
        strategy_config = _build_strategy_config(config, strategy, rounds, critique)
    except (FileNotFoundError, ConfigurationError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    if question_file:
        question_text = Path(question_file).read_text(encoding="utf-8").strip()
    elif question:
        question_text = question
    else:
        console.print("[bold red]Error:[/bold red] Provide a QUESTION argument or --file.")
        sys.exit(1)

    providers = _build_providers(config)
    if CHAIR not in providers:
        console.print(
            f"[bold red]Error:[/bold red] The chair ({CHAIR}) has no provider. "
            f"Set {config.agents[CHAIR].api_key_env} in .env."
        )
        sys.exit(1)

    if not skip_health_check:
        providers = _check_and_filter_providers(providers)

    executor = _build_executor(config, providers)
    output_dir = Path(output_path) if output_path else config.defaults.output_dir

    console.print(
        f"\n[bold cyan]AI Council[/bold cyan] ({strategy_config.strategy}, "
        f"{len(providers)}/{len(config.agents)} agents live)"
    )
    console.print(f"Question: [italic]{question_text[:80]}{'...' if len(question_text) > 80 else ''}[/italic]\n")

    try:
        result = asyncio.run(_run_council(question_text, strategy_config, executor))
    except ConfigurationError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)
    except SynthesisError as exc:
        console.print(f"[bold red]Synthesis failed:[/bold red] {exc}")
        sys.exit(1)

    for rnd in result.rounds:
        print_round_summary(rnd)

    print_synthesis(result)

    models = {agent_id: provider.model_string() for agent_id, provider in providers.items()}
    saved_path = save_to_file(result, question_text, output_dir, models=models)
    console.print(f"\n[dim]Saved to: {saved_path}[/dim]")
    if save_json_flag:
        json_path = save_json(result, saved_path.with_suffix(".json"))
        console.print(f"[dim]JSON: {json_path}[/dim]")


if __name__ == "__main__":
    main()
