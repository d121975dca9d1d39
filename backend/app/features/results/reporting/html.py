"""HTML report generator using Jinja2 templates."""

import webbrowser
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader, select_autoescape

from backend.app.core import logs
from backend.app.core.config import settings
from ..models import ScanResultView
from ..schemas import ExportResponse, ResultsQuery
from ..severity import DISPLAY_TO_INTERNAL

TEMPLATE_DIR = Path(__file__).parent.parent.parent.parent.parent / "templates"


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
    )


def _group_by_url(results: List[ScanResultView]) -> Dict[str, List[ScanResultView]]:
    grouped: Dict[str, List[ScanResultView]] = {}
    for result in results:
        grouped.setdefault(result.url, []).append(result)
    return grouped


def render_html_report(export: ExportResponse, query: ResultsQuery) -> str:
    """
    Render an exported result set to HTML.

    Args:
        export: Results to include, already filtered and ordered
        query: The filters that produced them (shown in the report header)

    Returns:
        The rendered HTML document
    """
    template = _environment().get_template("report.html")

    severity_counts = {name: 0 for name in DISPLAY_TO_INTERNAL}
    for result in export.results:
        severity_counts[result.category] = severity_counts.get(result.category, 0) + 1

    return template.render(
        app_name=settings.APP_NAME,
        generated_at=datetime.now(timezone.utc),
        total_results=export.total_results,
        deduplicated=export.deduplicated,
        severity_counts=severity_counts,
        results_by_url=_group_by_url(export.results),
        search=query.search,
        sort_by=query.sort_by,
        severity_filters=query.severity_filters,
        compliance_filters=query.compliance_filters,
        scan_type_filters=query.scan_type_filters,
        category_filters=query.category_filters,
    )


def generate_html_report(
    export: ExportResponse,
    query: ResultsQuery,
    output_path: str = "accessibility-report.html",
) -> str:
    """
    Write an HTML report to disk.

    Returns:
        Absolute path to the generated report file
    """
    logs.info("Generating HTML report", "reporting", {"output": output_path})

    html = render_html_report(export, query)

    output_file = Path(output_path).absolute()
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(html)

    logs.info("Report generated", "reporting", {"path": str(output_file)})
    return str(output_file)


def open_report(path: str) -> None:
    """
    Open the HTML report in the default web browser.

    Args:
        path: Path to the HTML report file
    """
    file_url = f"file://{Path(path).absolute()}"
    logs.debug("Opening report in browser", "reporting", {"url": file_url})
    webbrowser.open(file_url)
