"""Results services - filter, sort, paginate and summarize scan findings."""

import math
from typing import Dict, List, Optional

from backend.app.core import AppException, NotFoundError, ResultsFetchError, logs
from .estimates import calculate_estimated_time, estimate_fix_time
from .models import ScanResultRecord, ScanResultView, ScanStatus, Severity, Summary
from .predicates import ProjectScope, ScanStatusIn, build_ordering, build_predicate
from .schemas import (
    DashboardStats,
    ExportResponse,
    ProjectStats,
    ResultsQuery,
    ResultsResponse,
    StatsOverview,
)
from .severity import display_scan_type, to_display
from .store import ResultStore


def to_view(record: ScanResultRecord, with_estimate: bool = False) -> ScanResultView:
    """Shape a stored result for clients."""
    return ScanResultView(
        id=record.id,
        scan_id=record.scan_id,
        url=record.url,
        message=record.message,
        element=record.element or None,
        severity=record.severity,
        impact=record.impact or None,
        help=record.help or None,
        tags=record.tags,
        element_path=record.element_path or None,
        details=record.details,
        created_at=record.created_at,
        updated_at=record.updated_at,
        scan_type=display_scan_type(record.scan_scan_type),
        category=to_display(record.severity),
        estimated_fix_time=(
            estimate_fix_time(record.severity, record.message, record.tags)
            if with_estimate
            else None
        ),
    )


def build_summary(total: int, counts: Dict[str, int]) -> Summary:
    """Summary from per-severity counts over the full filtered set."""
    return Summary(
        total=total,
        critical=counts.get(Severity.CRITICAL.value, 0),
        serious=counts.get(Severity.HIGH.value, 0),
        moderate=counts.get(Severity.MEDIUM.value, 0),
        minor=counts.get(Severity.LOW.value, 0),
        info=counts.get(Severity.INFO.value, 0),
    )


def deduplicate_results(records: List[ScanResultRecord]) -> List[ScanResultRecord]:
    """Keep the newest record per url/message/element/severity.

    A replaced record keeps the position of the first one seen.
    """
    unique: Dict[str, ScanResultRecord] = {}
    for record in records:
        key = "|".join(
            (record.url, record.message, record.element or "", record.severity.value)
        )
        existing = unique.get(key)
        if existing is None or record.created_at > existing.created_at:
            unique[key] = record
    return list(unique.values())


class ResultQueryService:
    """Answers result listings against an injected store."""

    def __init__(self, store: ResultStore, category_mode: Optional[str] = None) -> None:
        self.store = store
        self.category_mode = category_mode

    def get_results(self, query: ResultsQuery) -> ResultsResponse:
        """
        Fetch one page of results and the summary of the whole filtered set.

        Args:
            query: Validated filter/sort/pagination state

        Returns:
            ResultsResponse for the requested page

        Raises:
            ConfigurationInconsistencyError: Conflicting category/severity filters
            ValidationError: Unknown category in severity_range mode
            ResultsFetchError: Any store failure
        """
        predicate = build_predicate(query, self.category_mode)
        ordering = build_ordering(query.sort_by)
        skip = (query.page - 1) * query.page_size

        logs.debug(
            "Fetching results",
            "results",
            {"conditions": len(predicate), "sort_by": query.sort_by, "page": query.page},
        )

        try:
            total_results = self.store.count(predicate)
            records = self.store.find_many(
                predicate, ordering, skip=skip, take=query.page_size
            )
            counts = self.store.severity_counts(predicate)
        except Exception as e:
            logs.error("Error fetching accessibility results", "results", exception=e)
            raise ResultsFetchError() from e

        return ResultsResponse(
            results=[to_view(r) for r in records],
            summary=build_summary(total_results, counts),
            total_pages=math.ceil(total_results / query.page_size),
            total_results=total_results,
        )

    def export(self, query: ResultsQuery, deduplicate: bool = False) -> ExportResponse:
        """
        Fetch every filtered result (ignoring pagination) for a report.

        Deduplication only applies to project-wide exports, where repeated
        scans report the same finding more than once.

        Raises:
            NotFoundError: Nothing matched
            ResultsFetchError: Any store failure
        """
        predicate = build_predicate(query, self.category_mode)
        ordering = build_ordering(query.sort_by)

        try:
            records = self.store.find_many(predicate, ordering)
        except Exception as e:
            logs.error("Error exporting results", "export", exception=e)
            raise ResultsFetchError() from e

        if not records:
            raise NotFoundError(
                "No accessibility results found. Please run some scans first."
            )

        applied = deduplicate and query.project_id is not None and query.scan_id is None
        if applied:
            unique = deduplicate_results(records)
            logs.info(
                "Deduplicated export",
                "export",
                {"before": len(records), "after": len(unique)},
            )
            records = unique

        return ExportResponse(
            results=[to_view(r, with_estimate=True) for r in records],
            total_results=len(records),
            deduplicated=applied,
        )


class DashboardStatsService:
    """Per-project issue totals over completed scans."""

    COMPLETED = (ScanStatus.COMPLETED.value,)

    def __init__(self, store: ResultStore) -> None:
        self.store = store

    def get_stats(self) -> DashboardStats:
        try:
            projects = self.store.list_projects()
            project_stats: List[ProjectStats] = []
            total_scans = 0
            last_scan_date = None

            for project in projects:
                scans = self.store.list_scans(project.id, statuses=self.COMPLETED)
                counts = self.store.severity_counts(
                    (ProjectScope(project.id), ScanStatusIn(self.COMPLETED))
                )
                summary = build_summary(sum(counts.values()), counts)
                latest = scans[0].started_at if scans else None

                total_scans += len(scans)
                if latest is not None and (last_scan_date is None or latest > last_scan_date):
                    last_scan_date = latest

                project_stats.append(
                    ProjectStats(
                        id=project.id,
                        name=project.name,
                        total_issues=summary.total,
                        critical_issues=summary.critical,
                        serious_issues=summary.serious,
                        moderate_issues=summary.moderate,
                        minor_issues=summary.minor,
                        estimated_time=calculate_estimated_time(
                            summary.critical, summary.serious, summary.moderate, summary.minor
                        ),
                        last_scan=latest,
                    )
                )
        except Exception as e:
            logs.error("Error fetching dashboard stats", "stats", exception=e)
            raise AppException("Failed to fetch dashboard stats") from e

        critical = sum(p.critical_issues for p in project_stats)
        serious = sum(p.serious_issues for p in project_stats)
        moderate = sum(p.moderate_issues for p in project_stats)
        minor = sum(p.minor_issues for p in project_stats)
        total_issues = sum(p.total_issues for p in project_stats)

        overview = StatsOverview(
            total_projects=len(project_stats),
            total_scans=total_scans,
            total_issues=total_issues,
            critical_issues=critical,
            serious_issues=serious,
            moderate_issues=moderate,
            minor_issues=minor,
            total_estimated_time=calculate_estimated_time(critical, serious, moderate, minor),
            average_issues_per_project=(
                total_issues / len(project_stats) if project_stats else 0
            ),
            last_scan_date=last_scan_date,
        )
        return DashboardStats(overview=overview, projects=project_stats)
