from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from orgmigrate.orchestrator import RunReport


def _format_bytes(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    return f"{value / (1024 * 1024):.2f} MB"


def print_report(report: RunReport, console: Optional[Console] = None) -> None:
    """
    Render the run report as a rich table followed by the error list.
    """
    console = console or Console()

    title = "Migration Statistics"
    if report.environment:
        title = f"{title}\n[dim]Environment: {report.environment}[/dim]"

    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"Completed in {report.duration_seconds:.2f}s │ Peak memory {_format_bytes(report.peak_rss_bytes)}",
    )
    table.add_column("Entity", style="cyan", no_wrap=True)
    table.add_column("Migrated", justify="right", style="bold green")

    table.add_row("Organizations", f"{report.organizations:,}")
    table.add_row("Programs", f"{report.programs:,}")
    table.add_row("Media Items", f"{report.media_items:,}")
    table.add_row("Testimonials", f"{report.testimonials:,}")
    table.add_row("Amenities", f"{report.amenities:,}")

    console.print(table)

    if report.cleared:
        console.print("[dim]Existing data was cleared before the run.[/dim]")
    for warning in report.clearing_warnings:
        console.print(warning, style="yellow", markup=False, highlight=False)

    if report.errors:
        console.print(f"\n[bold red]Errors ({len(report.errors)}):[/bold red]")
        for error in report.errors:
            console.print(f"   - {error}", markup=False, highlight=False)
    else:
        console.print("[green]No errors.[/green]")


__all__ = ["print_report"]
