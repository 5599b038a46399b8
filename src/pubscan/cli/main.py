"""Main CLI entry point using Typer."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from pubscan import __version__
from pubscan.core.aggregator import Aggregator
from pubscan.core.config import (
    Config,
    ConfigLoader,
    load_token,
    read_repositories,
)
from pubscan.core.errors import ConfigError, OutputWriteError
from pubscan.core.report import build_report
from pubscan.github.client import GitHubClient
from pubscan.github.fetcher import BranchStrategy, RepositoryFetcher
from pubscan.reporters.json_reporter import JSONReporter
from pubscan.reporters.terminal import TerminalReporter

EPILOG = """\
Example: pubscan --env .env --repos repos.txt --out stats.json --limit 3

The env file must define GITHUB_TOKEN, e.g. GITHUB_TOKEN=ghp_ABC123xyz
"""

app = typer.Typer(
    name="pubscan",
    help="Collect pubspec.yaml dependency usage statistics from GitHub repositories.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"pubscan {__version__}")
        raise typer.Exit()


@app.command(epilog=EPILOG)
def collect(
    env_file: Path = typer.Option(
        ...,
        "--env",
        help="Path to .env file containing GITHUB_TOKEN",
    ),
    repos_file: Path = typer.Option(
        ...,
        "--repos",
        help="Path to a file with GitHub repositories (owner/name, one per line)",
    ),
    out: Path = typer.Option(
        ...,
        "--out",
        help="Path to JSON file to write the result",
    ),
    limit: int | None = typer.Option(
        None,
        "--limit",
        min=1,
        help="Limit of concurrent requests [default: 5]",
    ),
    min_usage: int | None = typer.Option(
        None,
        "--min",
        min=1,
        help="Minimum number of repositories using a package [default: 1]",
    ),
    branch: BranchStrategy | None = typer.Option(
        None,
        "--branch",
        help="Read the manifest from the latest updated branch or the default branch [default: latest]",
    ),
    delay: float | None = typer.Option(
        None,
        "--delay",
        min=0,
        help="Pause in seconds after each repository [default: 0.2]",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Timeout in seconds for each API request [default: 10]",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Count how many repositories declare each pubspec.yaml dependency."""
    try:
        config = _load_config(config_file)
        # CLI flags override config file values
        if limit is not None:
            config.limit = limit
        if min_usage is not None:
            config.min_usage = min_usage
        if branch is not None:
            config.branch_strategy = branch.value
        if delay is not None:
            config.delay = delay
        if timeout is not None:
            config.timeout = timeout
        config.validate()

        token = load_token(env_file)
        repos, invalid, duplicates = read_repositories(repos_file)
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    for entry in invalid:
        err_console.print(f"[yellow]Warning: invalid repo format, skipped: {escape(entry)}[/yellow]")
    for repo in duplicates:
        err_console.print(f"[yellow]Warning: duplicate repository, counted once: {escape(str(repo))}[/yellow]")
    if not repos:
        err_console.print("[yellow]Warning: no valid repositories to scan[/yellow]")

    client = GitHubClient(token, api_url=config.api_url, timeout=config.timeout)
    fetcher = RepositoryFetcher(client, BranchStrategy.from_string(config.branch_strategy))
    aggregator = Aggregator(
        fetcher, console=console, err_console=err_console, delay=config.delay
    )

    result = aggregator.collect(repos, limit=config.limit)
    report = build_report(
        result.counters,
        min_usage=config.min_usage,
        url_template=config.reference_url,
    )

    try:
        JSONReporter().write(report, out)
    except OutputWriteError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    TerminalReporter(console=console).render(report, result)
    console.print(
        f"[green]Stats written to {escape(str(out))} ({report.total_packages} packages)[/green]"
    )


def _load_config(config_file: Path | None) -> Config:
    loader = ConfigLoader()
    if config_file is not None:
        return loader.load_from_file(config_file)
    return loader.load(Path.cwd())
