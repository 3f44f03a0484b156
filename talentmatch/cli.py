"""
TalentMatch Command Line Interface

Developer commands for scoring candidates against jobs, summarizing
application exports and preparing the database.
"""

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="talentmatch",
    help="Candidate-job matching and application lifecycle CLI",
    add_completion=False,
)
console = Console()


@app.callback()
def main():
    """Candidate-job matching and application lifecycle CLI."""
    from talentmatch.utils.logger import setup_logging

    setup_logging()


def _load_json(path: Path) -> Any:
    """Read a JSON file or exit with an error message."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Error: Cannot read {path}: {e}[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path} is not valid JSON: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def version():
    """Show application version."""
    from talentmatch import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show the effective configuration."""
    from talentmatch.utils.config import get_settings

    settings = get_settings()

    table = Table(title="TalentMatch Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Default Profile", settings.scoring.default_profile)
    table.add_row("Daily Window (days)", str(settings.stats.daily_window_days))
    table.add_row("Monthly Window (months)", str(settings.stats.monthly_window_months))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def profiles():
    """List the built-in weighting profiles."""
    from talentmatch.data.models import CRITERIA, WeightingProfile

    table = Table(title="Weighting Profiles")
    table.add_column("Profile", style="cyan")
    for criterion in CRITERIA:
        table.add_column(criterion.replace("_", " ").title(), justify="right")

    for name in WeightingProfile.available():
        weights = WeightingProfile.named(name).to_dict()
        table.add_row(name, *(str(weights[c]) for c in CRITERIA))

    console.print(table)


@app.command()
def score(
    candidate_file: Path = typer.Argument(..., help="Candidate profile JSON file"),
    job_file: Path = typer.Argument(..., help="Job requirements JSON file"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Weighting profile name"),
):
    """Score a candidate profile against a job."""
    from talentmatch.core.matching import MatchScorer
    from talentmatch.data.models import CRITERIA, WeightingProfile

    candidate = _load_json(candidate_file)
    job = _load_json(job_file)
    if not isinstance(candidate, dict) or not isinstance(job, dict):
        console.print("[red]Error: Candidate and job files must each hold a JSON object.[/red]")
        raise typer.Exit(1)

    try:
        scorer = MatchScorer(profile=profile)
    except KeyError:
        console.print(f"[red]Error: Unknown profile '{profile}'.[/red]")
        console.print(f"[dim]Available: {', '.join(WeightingProfile.available())}[/dim]")
        raise typer.Exit(1)

    result = scorer.score(candidate, job)
    weights = scorer.profile

    console.print(
        f"[bold]Score:[/bold] [green]{result.score}[/green] ({result.score_level.value})  "
        f"[bold]Skills match:[/bold] [green]{result.skills_match}%[/green]  "
        f"[dim]profile={result.profile}[/dim]"
    )

    table = Table(title="Breakdown")
    table.add_column("Criterion", style="cyan")
    table.add_column("Points", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Evaluated")
    for criterion in CRITERIA:
        weight = weights.weight_for(criterion)
        if weight <= 0:
            continue
        table.add_row(
            criterion,
            f"{getattr(result.breakdown, criterion):g}",
            str(weight),
            "yes" if result.was_evaluated(criterion) else "[dim]no[/dim]",
        )
    console.print(table)

    if result.missing_skills:
        console.print(f"[yellow]Missing skills:[/yellow] {', '.join(result.missing_skills)}")


@app.command()
def stats(
    applications_file: Path = typer.Argument(..., help="JSON array of application documents"),
    company: Optional[str] = typer.Option(None, "--company", "-c", help="Only this employer"),
    job: Optional[str] = typer.Option(None, "--job", "-j", help="Only this job"),
    window: Optional[int] = typer.Option(None, "--window", "-w", min=1, help="Daily window in days"),
):
    """Summarize an export of application documents."""
    from talentmatch.core.stats import StatsAggregator

    documents = _load_json(applications_file)
    if not isinstance(documents, list):
        console.print("[red]Error: Applications file must hold a JSON array.[/red]")
        raise typer.Exit(1)

    aggregator = StatsAggregator(daily_window_days=window)
    summary = aggregator.compute(documents, company_id=company, job_id=job)

    console.print(
        f"[bold]Total:[/bold] {summary.total}  [bold]Viewed:[/bold] {summary.viewed} "
        f"({summary.view_rate}%)  [bold]Avg score:[/bold] {summary.avg_score}  "
        f"[bold]Avg skills match:[/bold] {summary.avg_skills_match}"
    )

    table = Table(title="By Status")
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Avg Score", justify="right")
    table.add_column("Avg Skills", justify="right")
    table.add_column("Avg Experience", justify="right")
    for status, group in summary.by_status.items():
        table.add_row(
            status,
            str(group.count),
            f"{group.avg_score:.1f}",
            f"{group.avg_skills_match:.1f}",
            f"{group.avg_experience:.1f}",
        )
    console.print(table)

    if summary.daily_counts:
        daily = Table(title=f"Last {aggregator.daily_window_days} Days")
        daily.add_column("Date", style="cyan")
        daily.add_column("Applications", justify="right")
        for day, count in summary.daily_counts.items():
            daily.add_row(day, str(count))
        console.print(daily)


@app.command()
def init_db():
    """Create the application collection indexes."""
    import asyncio

    from talentmatch.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    try:
        db_manager = get_database_manager()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        if not db_manager.check_sync_connection():
            console.print("[red]Error: Could not connect to MongoDB.[/red]")
            console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
            raise typer.Exit(1)

        asyncio.run(db_manager.ensure_indexes())
    finally:
        db_manager.close()

    console.print("[green]Database initialized successfully![/green]")


if __name__ == "__main__":
    app()
