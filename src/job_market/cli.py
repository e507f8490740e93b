"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from job_market.clients.llm_client import LLMClient
from job_market.config import load_config
from job_market.export.csv_exporter import export_filename, save_csv
from job_market.logging.cost_calculator import calculate_cost
from job_market.models.filters import DIMENSIONS, Filters, filter_options
from job_market.models.report import MarketReport
from job_market.pipeline.report_fetcher import ReportFetcher
from job_market.pipeline.session import MarketSession, ViewState

app = typer.Typer(
    name="job-market",
    help="Tier-wise job market analysis for Indian graduates",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _render_report(report: MarketReport) -> None:
    table = Table(title="Market analysis by city tier", show_lines=True)
    table.add_column("Tier", style="bold")
    table.add_column("Demand")
    table.add_column("Openings", justify="right")
    table.add_column("Salary (LPA)", justify="right")
    table.add_column("Top cities")
    table.add_column("Top employers")
    table.add_column("Key insight")
    for row in report.tier_analyses:
        table.add_row(
            row.tier.value,
            row.demand_level.value,
            f"{row.estimated_openings:,}",
            f"{row.salary_min_lpa:g} - {row.salary_max_lpa:g}",
            ", ".join(row.top_cities),
            ", ".join(row.top_employers),
            row.key_insight,
        )
    console.print(table)
    if report.summary:
        console.print(Panel(report.summary, title="Summary"))


@app.command()
def analyze(
    qualification: str = typer.Option("All Degrees", "--qualification", "-q", help="Qualification"),
    sector: str = typer.Option("All Sectors", "--sector", "-s", help="Sector"),
    location: str = typer.Option("All Tiers", "--location", "-l", help="Location tier"),
    job_role: str = typer.Option("All Roles", "--job-role", "-r", help="Job role"),
    output: Path = typer.Option(None, "--output", "-o", help="CSV output path"),
    csv_out: bool = typer.Option(False, "--csv", help="Save CSV with a generated file name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Analyze the job market for the selected filters."""
    _setup_logging(verbose)
    try:
        filters = Filters.from_labels(
            qualification=qualification,
            sector=sector,
            location=location,
            job_role=job_role,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[dim]Run `job-market options` to list valid values.[/dim]")
        raise typer.Exit(1)

    config = load_config()
    llm = LLMClient(timeout=config.llm.timeout, max_attempts=config.llm.max_attempts)
    fetcher = ReportFetcher(
        llm,
        model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
    session = MarketSession(fetcher, filters=filters)

    if verbose:
        constraints = filters.constraints()
        console.print(f"[dim]Filters: {constraints or 'none'}[/dim]")
        console.print(f"[dim]Model: {config.llm.model}[/dim]")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Analyzing live job market...", total=None)
        asyncio.run(session.analyze())

    state = session.view_state
    if state is ViewState.ERROR:
        console.print(f"[red]{session.error}[/red]")
        raise typer.Exit(1)
    if state is ViewState.NO_RESULTS:
        console.print(
            Panel(
                "The AI could not find a significant number of results for the "
                "selected filters. Please try a different combination.",
                title="No Results Found",
            )
        )
        return

    _render_report(session.report)

    usage = llm.get_token_summary()
    cost = calculate_cost(usage["calls"])
    console.print(
        f"[dim]Tokens: {usage['input']} in / {usage['output']} out, est. ${cost:.4f}[/dim]"
    )

    if output is None and csv_out:
        output = Path("./output") / export_filename(filters, config.export.filename_prefix)
    if output is not None:
        saved = save_csv(session.export_csv(), output)
        console.print(f"[green]CSV saved: {saved}[/green]")


@app.command()
def options() -> None:
    """List the valid values for every filter."""
    for name, (_, label, _) in DIMENSIONS.items():
        values = filter_options(name)
        console.print(f"[bold]{label}[/bold] (--{name.replace('_', '-')})")
        for value in values:
            console.print(f"  {value}")


if __name__ == "__main__":
    app()
