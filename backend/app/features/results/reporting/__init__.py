"""Reporting modules for scan results."""

from .html import generate_html_report, open_report, render_html_report
from .console import (
    console,
    show_error,
    show_results_table,
    show_stats,
    show_summary,
)

__all__ = [
    "generate_html_report",
    "render_html_report",
    "open_report",
    "console",
    "show_results_table",
    "show_summary",
    "show_stats",
    "show_error",
]
