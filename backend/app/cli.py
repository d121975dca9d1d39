"""Typer CLI application for the Devtul results service."""

from typing import List, Optional

import typer

from backend.app.core import AppException, configure_logging, settings
from backend.app.core.database import create_db_engine, init_db
from backend.app.features.results.reporting import (
    console,
    generate_html_report,
    open_report,
    show_error,
    show_results_table,
    show_stats,
    show_summary,
)
from backend.app.features.results.schemas import ResultsQuery, build_results_query
from backend.app.features.results.services import DashboardStatsService, ResultQueryService
from backend.app.features.results.demo import build_demo_store
from backend.app.features.results.store import ResultStore, SqlResultStore

app = typer.Typer(
    name="devtul",
    help="Devtul results - query, summarize and export website scan findings",
    add_completion=False,
    no_args_is_help=True,
)


def _store(database_url: Optional[str], demo: bool = False) -> ResultStore:
    if demo:
        return build_demo_store()
    return SqlResultStore(create_db_engine(database_url))


def _query(
    page: int,
    page_size: int,
    sort_by: str,
    search: str,
    project: Optional[str],
    scan: Optional[str],
    severity: Optional[List[str]],
    compliance: Optional[List[str]],
    scan_type: Optional[List[str]],
    category: Optional[List[str]],
    include_resolved: bool,
) -> ResultsQuery:
    return build_results_query(
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        search=search,
        project_id=project,
        scan_id=scan,
        severity_filters=severity or [],
        compliance_filters=compliance or [],
        scan_type_filters=scan_type or [],
        category_filters=category or [],
        include_resolved=include_resolved,
    )


@app.command()
def results(
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
    page_size: int = typer.Option(
        settings.DEFAULT_PAGE_SIZE, "--page-size", "-n", help="Results per page"
    ),
    sort_by: str = typer.Option(
        "severity", "--sort-by", "-s", help="severity, url or date"
    ),
    search: str = typer.Option("", "--search", "-q", help="Text to search for"),
    project: Optional[str] = typer.Option(None, "--project", help="Project id"),
    scan: Optional[str] = typer.Option(
        None, "--scan", help="Scan id (takes precedence over --project)"
    ),
    severity: Optional[List[str]] = typer.Option(
        None, "--severity", help="critical, serious, moderate, minor or info"
    ),
    compliance: Optional[List[str]] = typer.Option(
        None, "--compliance", help="Compliance tag (e.g. wcag2aa)"
    ),
    scan_type: Optional[List[str]] = typer.Option(
        None, "--scan-type", help="security, accessibility, seo, performance, uptime, ssl"
    ),
    category: Optional[List[str]] = typer.Option(
        None, "--category", help="Result category (e.g. headers, xss)"
    ),
    include_resolved: bool = typer.Option(
        False, "--include-resolved", help="Include findings marked resolved"
    ),
    database_url: Optional[str] = typer.Option(
        None, "--database-url", help="Override DATABASE_URL"
    ),
    demo: bool = typer.Option(False, "--demo", help="Use the built-in sample data"),
) -> None:
    """
    List scan results with filters and a severity summary.

    Example usage:

        devtul results --severity critical --severity serious

        devtul results --project p1 --search contrast --sort-by url

        devtul results --demo
    """
    configure_logging()
    try:
        query = _query(
            page, page_size, sort_by, search, project, scan,
            severity, compliance, scan_type, category, include_resolved,
        )
        service = ResultQueryService(
            _store(database_url, demo), category_mode=settings.CATEGORY_FILTER_MODE
        )
        response = service.get_results(query)
    except AppException as e:
        show_error(e.message)
        raise typer.Exit(1)

    show_results_table(response, page=query.page)
    show_summary(response.summary)


@app.command()
def export(
    output: str = typer.Option(
        "accessibility-report.html", "--output", "-o", help="Output file path for the HTML report"
    ),
    sort_by: str = typer.Option("severity", "--sort-by", "-s", help="severity, url or date"),
    search: str = typer.Option("", "--search", "-q", help="Text to search for"),
    project: Optional[str] = typer.Option(None, "--project", help="Project id"),
    scan: Optional[str] = typer.Option(None, "--scan", help="Scan id"),
    severity: Optional[List[str]] = typer.Option(None, "--severity", help="Display severity"),
    compliance: Optional[List[str]] = typer.Option(None, "--compliance", help="Compliance tag"),
    scan_type: Optional[List[str]] = typer.Option(None, "--scan-type", help="Scan type token"),
    category: Optional[List[str]] = typer.Option(None, "--category", help="Result category"),
    include_resolved: bool = typer.Option(False, "--include-resolved"),
    deduplicate: bool = typer.Option(
        False, "--deduplicate", help="Collapse repeated findings across a project's scans"
    ),
    no_open: bool = typer.Option(
        False, "--no-open", help="Don't automatically open the report in browser"
    ),
    database_url: Optional[str] = typer.Option(None, "--database-url"),
    demo: bool = typer.Option(False, "--demo", help="Use the built-in sample data"),
) -> None:
    """Export every matching result to an HTML report."""
    configure_logging()
    try:
        query = _query(
            1, settings.DEFAULT_PAGE_SIZE, sort_by, search, project, scan,
            severity, compliance, scan_type, category, include_resolved,
        )
        service = ResultQueryService(
            _store(database_url, demo), category_mode=settings.CATEGORY_FILTER_MODE
        )
        exported = service.export(query, deduplicate=deduplicate)
    except AppException as e:
        show_error(e.message)
        raise typer.Exit(1)

    report_path = generate_html_report(exported, query, output)
    console.print(f"[dim]{exported.total_results} results exported to: {report_path}[/dim]")

    if not no_open:
        open_report(report_path)


@app.command()
def stats(
    database_url: Optional[str] = typer.Option(None, "--database-url"),
    demo: bool = typer.Option(False, "--demo", help="Use the built-in sample data"),
) -> None:
    """Show issue totals per project over completed scans."""
    configure_logging()
    try:
        dashboard = DashboardStatsService(_store(database_url, demo)).get_stats()
    except AppException as e:
        show_error(e.message)
        raise typer.Exit(1)
    show_stats(dashboard)


@app.command("init-db")
def init_database(
    database_url: Optional[str] = typer.Option(None, "--database-url"),
) -> None:
    """Create the database tables."""
    configure_logging()
    engine = create_db_engine(database_url)
    init_db(engine)
    console.print(f"[green]Tables ready[/green] [dim]{engine.url}[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Devtul results v{settings.APP_VERSION}")


@app.command()
def info() -> None:
    """Show configuration information."""
    console.print()
    console.print("[bold]Configuration[/bold]")
    console.print()
    console.print(f"  App Name:         {settings.APP_NAME}")
    console.print(f"  Version:          {settings.APP_VERSION}")
    console.print(f"  Environment:      {settings.ENVIRONMENT}")
    console.print(f"  Database:         {settings.DATABASE_URL}")
    console.print(f"  Page size:        {settings.DEFAULT_PAGE_SIZE} (max {settings.MAX_PAGE_SIZE})")
    console.print(f"  Category filter:  {settings.CATEGORY_FILTER_MODE}")
    console.print()


if __name__ == "__main__":
    app()
