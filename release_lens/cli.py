"""
Command-line interface for Release Lens.
"""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from release_lens.cache import (
    clear_cache,
    get_cache_stats,
    load_cached_releases,
    save_cached_releases,
)
from release_lens.config import (
    get_output_dir,
    get_repository_metrics,
    is_cache_enabled,
    set_cache_dir,
    set_cache_ttl,
    set_verify_ssl,
)
from release_lens.core import ReleaseAnalyzer
from release_lens.github import GitHubReleaseFetcher, ReleaseFetchError, parse_github_url
from release_lens.http_client import close_async_http_client
from release_lens.models import (
    ComprehensiveAnalysis,
    ReleaseNote,
    ValidationError,
    release_to_dict,
)
from release_lens.report import write_reports

# Owner used in report file names when --repo-name has no owner part
LOCAL_OWNER = "local"

# Rows shown in summary tables unless --verbose is set
SUMMARY_ROWS = 5

# --- Typer App ---
app = typer.Typer()
console = Console()

# --- Helper Functions ---


async def _fetch_releases(owner: str, repo: str) -> list[ReleaseNote]:
    try:
        fetcher = GitHubReleaseFetcher()
        return await fetcher.fetch_release_notes(owner, repo)
    finally:
        await close_async_http_client()


def load_releases(owner: str, repo: str, use_cache: bool = True) -> list[dict]:
    """Load releases in wire format, from cache when possible, else from GitHub.

    Args:
        owner: Repository owner.
        repo: Repository name.
        use_cache: If False, always fetch and skip writing the cache.

    Returns:
        List of release dicts in wire format.
    """
    if use_cache and is_cache_enabled():
        cached = load_cached_releases(owner, repo)
        if cached is not None:
            console.print(
                f"[dim]Loaded {len(cached)} release(s) from cache: {owner}/{repo}[/dim]"
            )
            return cached

    console.print(f"🔍 Fetching releases for [bold]{owner}/{repo}[/bold]...")
    fetched = asyncio.run(_fetch_releases(owner, repo))
    releases = [release_to_dict(release) for release in fetched]

    if use_cache and is_cache_enabled():
        save_cached_releases(owner, repo, releases)
    return releases


def _format_score(value: float) -> str:
    return f"{value:.2f}"


def display_analysis(
    repo_name: str, analysis: ComprehensiveAnalysis, verbose: bool = False
) -> None:
    """Display the comprehensive analysis as rich tables."""
    limit = None if verbose else SUMMARY_ROWS

    ratings_table = Table(title=f"{repo_name} Release Ratings")
    ratings_table.add_column("Version", justify="left", style="cyan", no_wrap=True)
    ratings_table.add_column("Date")
    ratings_table.add_column("Score", justify="right", style="green")
    ratings_table.add_column("Contributors", justify="right")
    ratings_table.add_column("Reactions", justify="right")
    for rating in analysis.ratings[:limit]:
        ratings_table.add_row(
            rating.version,
            rating.date,
            str(rating.score),
            str(rating.contributor_count),
            str(rating.reaction_count),
        )
    console.print(ratings_table)

    maturity_table = Table(show_header=True, header_style="bold magenta")
    maturity_table.add_column("Maturity Indicator", style="cyan")
    maturity_table.add_column("Score", justify="right")
    for name, value in analysis.maturity._asdict().items():
        color = "green" if value >= 0.7 else "yellow" if value >= 0.4 else "red"
        maturity_table.add_row(
            name.replace("_", " ").title(),
            f"[{color}]{_format_score(value)}[/{color}]",
        )
    console.print(maturity_table)

    velocity = analysis.evolution.development_velocity
    console.print(
        f"[dim]Velocity (per 30 days): {_format_score(velocity.release_frequency)} "
        f"releases, {_format_score(velocity.feature_velocity)} features, "
        f"{_format_score(velocity.breaking_change_frequency)} breaking changes[/dim]"
    )

    if analysis.insights:
        console.print("\n[bold cyan]Strategic Insights:[/bold cyan]")
        for insight in analysis.insights[:limit]:
            console.print(f"  • [bold]{insight.observation}[/bold]")
            console.print(f"    [dim]{insight.impact}[/dim]")
            if verbose:
                for action in insight.recommended_actions:
                    console.print(f"      - {action}")

    if analysis.opportunities:
        console.print("\n[bold cyan]Contribution Opportunities:[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Area", style="cyan")
        table.add_column("Type")
        table.add_column("Priority", justify="right")
        table.add_column("Complexity", justify="right")
        table.add_column("Skills")
        for opportunity in analysis.opportunities[:limit]:
            table.add_row(
                opportunity.area,
                opportunity.type,
                str(opportunity.priority),
                str(opportunity.complexity),
                ", ".join(opportunity.relevant_skills),
            )
        console.print(table)


def run_analysis(
    owner: str,
    repo: str,
    releases: list,
    output_dir: Path,
    verbose: bool = False,
    write: bool = True,
) -> ComprehensiveAnalysis:
    """Analyze releases, optionally write reports, and display a summary."""
    repo_name = repo if owner == LOCAL_OWNER else f"{owner}/{repo}"
    analyzer = ReleaseAnalyzer(releases, repo_name, get_repository_metrics())
    analysis = analyzer.analyze_comprehensively()

    if write:
        paths = write_reports(
            owner,
            repo,
            analyzer.releases,
            analysis,
            analyzer.generate_rating_markdown(),
            analyzer.generate_feature_story_markdown(),
            output_dir,
        )
        console.print(f"[green]✨ Wrote {len(paths)} report(s) to {output_dir}[/green]")
        if verbose:
            for kind, path in paths.items():
                console.print(f"  [dim]{kind}: {path}[/dim]")

    display_analysis(repo_name, analysis, verbose=verbose)
    return analysis


# --- CLI Commands ---


@app.command()
def analyze(
    repository: str = typer.Argument(
        ...,
        help="GitHub repository ('https://github.com/owner/repo' or 'owner/repo').",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for generated reports (default: ./release-notes).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Display every rating, insight and opportunity.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
    cache_dir: Path | None = typer.Option(
        None,
        "--cache-dir",
        help="Cache directory path (default: ~/.cache/release-lens).",
    ),
    cache_ttl: int | None = typer.Option(
        None,
        "--cache-ttl",
        help="Cache TTL in seconds (default: 86400 = 1 day).",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Disable cache and fetch fresh data.",
    ),
    clear_cache_flag: bool = typer.Option(
        False,
        "--clear-cache",
        help="Clear the cache entry of this repository before fetching.",
    ),
    no_write: bool = typer.Option(
        False,
        "--no-write",
        help="Only display the summary; do not write report files.",
    ),
):
    """Fetch the releases of a GitHub repository and analyze them."""
    try:
        owner, repo = parse_github_url(repository)
    except ValueError as e:
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        raise typer.Exit(code=1) from None

    # Apply cache configuration
    if cache_dir:
        set_cache_dir(cache_dir)
    if cache_ttl:
        set_cache_ttl(cache_ttl)
    set_verify_ssl(not insecure)

    if clear_cache_flag:
        cleared = clear_cache(owner, repo)
        console.print(f"[green]✨ Cleared {cleared} cache file(s).[/green]")

    try:
        releases = load_releases(owner, repo, use_cache=not no_cache)
        if not releases:
            console.print(f"[yellow]⚠️  No releases found for {owner}/{repo}[/yellow]")
            raise typer.Exit(code=0)
        run_analysis(
            owner,
            repo,
            releases,
            output_dir or get_output_dir(),
            verbose=verbose,
            write=not no_write,
        )
    except (ReleaseFetchError, ValueError) as e:
        # ValidationError is a ValueError
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        raise typer.Exit(code=1) from None


@app.command()
def report(
    file: Path = typer.Argument(
        ...,
        help="Releases JSON file previously written by 'analyze'.",
    ),
    repo_name: str = typer.Option(
        ...,
        "--repo-name",
        "-n",
        help="Repository name used in report titles ('owner/repo' or 'repo').",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for generated reports (default: ./release-notes).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Display every rating, insight and opportunity.",
    ),
):
    """Analyze a saved releases JSON file without network access."""
    if not file.is_file():
        console.print(f"[yellow]⚠️  File not found: {file}[/yellow]")
        console.print("[dim]Please check the file path and try again.[/dim]")
        raise typer.Exit(code=1)

    owner, _, repo = repo_name.rpartition("/")
    owner = owner or LOCAL_OWNER

    try:
        with open(file, "r", encoding="utf-8") as f:
            releases = json.load(f)
        if not isinstance(releases, list):
            raise ValidationError(
                f"Releases file must contain a list, got {type(releases).__name__}"
            )
        run_analysis(
            owner, repo, releases, output_dir or get_output_dir(), verbose=verbose
        )
    except json.JSONDecodeError as e:
        console.print(f"[yellow]⚠️  Unable to parse {file.name}: {e}[/yellow]")
        raise typer.Exit(code=1) from None
    except ValueError as e:
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        raise typer.Exit(code=1) from None


@app.command()
def cache_stats():
    """Display cache statistics."""
    stats = get_cache_stats()

    if not stats["exists"]:
        console.print(
            f"[yellow]Cache directory does not exist: {stats['cache_dir']}[/yellow]"
        )
        return

    console.print("[bold cyan]Cache Statistics[/bold cyan]")
    console.print(f"  Directory: {stats['cache_dir']}")
    console.print(f"  Total entries: {stats['total_entries']}")
    console.print(f"  Valid entries: [green]{stats['valid_entries']}[/green]")
    console.print(f"  Expired entries: [yellow]{stats['expired_entries']}[/yellow]")

    if stats["repositories"]:
        console.print("\n[bold cyan]Per-Repository Breakdown:[/bold cyan]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Repository", style="cyan")
        table.add_column("Releases", justify="right")
        table.add_column("Status")

        for name, repo_stats in stats["repositories"].items():
            status = (
                "[green]valid[/green]"
                if repo_stats["valid"]
                else "[yellow]expired[/yellow]"
            )
            table.add_row(name, str(repo_stats["releases"]), status)

        console.print(table)


if __name__ == "__main__":
    app()
