"""Rich terminal UI for CLI output."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..models import Summary
from ..schemas import DashboardStats, ResultsResponse

# Global console instance
console = Console()

SEVERITY_COLORS = {
    "critical": "red",
    "serious": "orange1",
    "moderate": "yellow",
    "minor": "blue",
    "info": "dim",
}


def show_results_table(response: ResultsResponse, page: int) -> None:
    """Display one page of results."""
    table = Table(
        title=f"Results (page {page} of {max(response.total_pages, 1)})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Severity", width=10)
    table.add_column("Type", width=8)
    table.add_column("URL", style="cyan", overflow="fold")
    table.add_column("Issue", overflow="fold")
    table.add_column("Tags", style="dim", overflow="fold")

    for result in response.results:
        color = SEVERITY_COLORS.get(result.category, "white")
        table.add_row(
            f"[{color}]{result.category}[/{color}]",
            result.scan_type,
            result.url,
            result.message,
            ", ".join(result.tags),
        )

    console.print()
    console.print(table)


def show_summary(summary: Summary) -> None:
    """Show severity totals for the whole filtered set."""
    lines = []
    for name in ("critical", "serious", "moderate", "minor", "info"):
        count = getattr(summary, name)
        if count:
            color = SEVERITY_COLORS[name]
            lines.append(f"[{color}]{name.upper()}: {count}[/{color}]")

    if summary.total:
        content = f"[bold]{summary.total} RESULTS[/bold]\n\n" + "  ".join(lines)
        panel = Panel(content, border_style="red", title="[bold]Summary[/bold]", title_align="left")
    else:
        panel = Panel(
            "[bold green]NO RESULTS MATCH[/bold green]",
            border_style="green",
            title="[bold]Summary[/bold]",
            title_align="left",
        )

    console.print()
    console.print(panel)


def show_stats(stats: DashboardStats) -> None:
    """Show dashboard totals and the per-project breakdown."""
    overview = stats.overview
    last_scan = overview.last_scan_date.strftime("%Y-%m-%d %H:%M") if overview.last_scan_date else "never"
    console.print()
    console.print(
        Panel(
            f"Projects: {overview.total_projects}   Scans: {overview.total_scans}\n"
            f"Issues: [bold]{overview.total_issues}[/bold]   "
            f"[red]critical {overview.critical_issues}[/red]  "
            f"[orange1]serious {overview.serious_issues}[/orange1]  "
            f"[yellow]moderate {overview.moderate_issues}[/yellow]  "
            f"[blue]minor {overview.minor_issues}[/blue]\n"
            f"Estimated fix time: {overview.total_estimated_time}\n"
            f"Last scan: {last_scan}",
            title="[bold cyan]Dashboard[/bold cyan]",
            title_align="left",
        )
    )

    if not stats.projects:
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Project", style="cyan")
    table.add_column("Issues", justify="right")
    table.add_column("Critical", justify="right", style="red")
    table.add_column("Serious", justify="right", style="orange1")
    table.add_column("Moderate", justify="right", style="yellow")
    table.add_column("Minor", justify="right", style="blue")
    table.add_column("Est. time", justify="right")

    for project in stats.projects:
        table.add_row(
            project.name,
            str(project.total_issues),
            str(project.critical_issues),
            str(project.serious_issues),
            str(project.moderate_issues),
            str(project.minor_issues),
            project.estimated_time,
        )
    console.print(table)


def show_error(message: str) -> None:
    """Display an error message without stack trace."""
    console.print(f"\n[bold red][ERROR][/bold red] {message}\n")
