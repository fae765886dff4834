"""Rank and feed command implementations."""

from pathlib import Path
from typing import Optional

import pendulum
import typer
from pendulum.parsing.exceptions import ParserError
from rich.console import Console
from rich.table import Table

from ..config import Config, GeoPolicy
from ..ingestion import build_profile
from ..pipeline import FeedMode, FeedPage, FeedRequest, FeedService
from ..ranking import RankingEngine, print_ranking_summary
from ..sources import InMemoryCandidateSource, InMemoryProfileSource

console = Console()

CLI_USER = "cli-user"


def _parse_now(now: Optional[str]):
    if now is None:
        return pendulum.now("UTC")
    try:
        return pendulum.parse(now)
    except (ParserError, ValueError) as e:
        console.print(f"[red]Invalid --now value {now!r}: {e}[/red]")
        raise typer.Exit(1)


def _load_sources(candidates_path: Path, profile_path: Optional[Path]):
    try:
        candidate_source = InMemoryCandidateSource.from_json(candidates_path)
        if profile_path is not None:
            profile_source = InMemoryProfileSource.from_json(profile_path, CLI_USER)
        else:
            profile_source = InMemoryProfileSource()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return candidate_source, profile_source


def _load_config(config_path: Optional[Path]):
    try:
        return Config(config_path).config
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def rank_command(
    candidates_path: Path = typer.Argument(..., help="JSON file with locations, posts and events"),
    profile_path: Optional[Path] = typer.Option(
        None, "--profile", "-p", help="JSON file with profile signals (omit for anonymous ranking)"
    ),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of items to return"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO-8601). Default: now"),
    geo_policy: Optional[GeoPolicy] = typer.Option(None, "--geo-policy", help="exponential or radius"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Rank candidates for a profile and show the score breakdown."""
    config = _load_config(config_path)
    reference = _parse_now(now)
    candidate_source, profile_source = _load_sources(candidates_path, profile_path)

    profile = None
    if profile_path is not None:
        profile = build_profile(profile_source.fetch_signals(CLI_USER))

    engine = RankingEngine(config.ranking, config.safety, geo_policy=geo_policy)
    try:
        result = engine.rank(candidate_source.load_candidates(), profile, limit=limit, now=reference)
    except (TypeError, ValueError) as e:
        console.print(f"[red]Ranking failed: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(result.model_dump_json())
    else:
        print_ranking_summary(result, top=limit)


def feed_command(
    candidates_path: Path = typer.Argument(..., help="JSON file with locations, posts and events"),
    profile_path: Optional[Path] = typer.Option(
        None, "--profile", "-p", help="JSON file with the viewer's profile signals"
    ),
    mode: FeedMode = typer.Option(FeedMode.RECOMMENDED, "--mode", "-m", help="Feed mode"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Items per page"),
    page: int = typer.Option(1, "--page", help="Page number"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO-8601). Default: now"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    as_json: bool = typer.Option(False, "--json", help="Print the page as JSON"),
) -> None:
    """Serve a feed page the way the feed endpoint does."""
    config = _load_config(config_path)
    reference = _parse_now(now)
    candidate_source, profile_source = _load_sources(candidates_path, profile_path)

    if limit is None:
        limit = config.feed.default_limit
    try:
        request = FeedRequest(limit=limit, page=page, mode=mode)
    except ValueError as e:
        console.print(f"[red]Invalid request: {e}[/red]")
        raise typer.Exit(1)

    service = FeedService(candidate_source, profile_source, config=config)
    viewer = CLI_USER if profile_path is not None else None
    feed_page = service.get_feed(request, viewer_id=viewer, now=reference)

    if as_json:
        console.print_json(feed_page.model_dump_json())
    else:
        print_feed_page(feed_page)


def print_feed_page(feed_page: FeedPage) -> None:
    """Print a feed page."""
    table = Table(title=f"{feed_page.mode.value.title()} feed - page {feed_page.page}")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("ID", style="yellow")
    table.add_column("Score", justify="right")
    table.add_column("Viewer")
    table.add_column("Reasons")

    start = (feed_page.page - 1) * feed_page.limit
    for i, entry in enumerate(feed_page.items, start + 1):
        score = "-"
        if entry.breakdown is not None:
            value = entry.breakdown.final if entry.breakdown.final is not None else entry.breakdown.composed
            score = f"{value:.3f}"
        viewer = " ".join(flag for flag, on in (("liked", entry.is_liked), ("saved", entry.is_saved)) if on)
        table.add_row(
            str(i),
            entry.candidate.kind,
            entry.candidate.id,
            score,
            viewer,
            "; ".join(entry.match_reasons),
        )

    console.print(table)
    mix = ", ".join(f"{kind}: {count}" for kind, count in feed_page.content_mix.items())
    console.print(f"  Content mix: {mix}")
    if feed_page.has_more:
        console.print(f"  [dim]More available: --page {feed_page.page + 1}[/dim]")
