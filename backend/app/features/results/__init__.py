"""Results feature module: querying and summarizing scan findings."""

from .models import ScanResultRecord, ScanResultView, ScanType, Severity, Summary
from .schemas import ResultsQuery, ResultsResponse, build_results_query
from .services import DashboardStatsService, ResultQueryService

__all__ = [
    "ScanResultRecord",
    "ScanResultView",
    "ScanType",
    "Severity",
    "Summary",
    "ResultsQuery",
    "ResultsResponse",
    "build_results_query",
    "ResultQueryService",
    "DashboardStatsService",
]
