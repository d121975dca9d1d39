"""FastAPI routes for the results API."""

from functools import lru_cache
from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends, Query, Response

from backend.app.core import logs, settings
from backend.app.core.database import get_engine
from .reporting import render_html_report
from .schemas import (
    DashboardStats,
    ErrorResponse,
    ExportResponse,
    ResultsQuery,
    ResultsResponse,
    build_results_query,
)
from .services import DashboardStatsService, ResultQueryService
from .store import ResultStore, SqlResultStore

router = APIRouter(
    tags=["results"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@lru_cache
def get_result_store() -> ResultStore:
    """Application store; overridden with a fake in tests."""
    return SqlResultStore(get_engine())


def get_query_service(store: ResultStore = Depends(get_result_store)) -> ResultQueryService:
    return ResultQueryService(store, category_mode=settings.CATEGORY_FILTER_MODE)


def get_stats_service(store: ResultStore = Depends(get_result_store)) -> DashboardStatsService:
    return DashboardStatsService(store)


def results_query_params(
    page: int = Query(1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize"),
    sort_by: str = Query("severity", alias="sortBy"),
    search: str = Query(""),
    project_id: Optional[str] = Query(None, alias="projectId"),
    scan_id: Optional[str] = Query(None, alias="scanId"),
    urls: List[str] = Query([]),
    severity_filters: List[str] = Query([], alias="severityFilters"),
    compliance_filters: List[str] = Query([], alias="complianceFilters"),
    scan_type_filters: List[str] = Query([], alias="scanTypeFilters"),
    category_filters: List[str] = Query([], alias="categoryFilters"),
    include_resolved: bool = Query(False, alias="includeResolved"),
) -> ResultsQuery:
    """Collect query-string parameters (array filters repeat the key)."""
    return build_results_query(
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        search=search,
        project_id=project_id,
        scan_id=scan_id,
        urls=urls,
        severity_filters=severity_filters,
        compliance_filters=compliance_filters,
        scan_type_filters=scan_type_filters,
        category_filters=category_filters,
        include_resolved=include_resolved,
    )


def _split_csv(values: List[str]) -> List[str]:
    return [part for value in values for part in value.split(",")]


@router.get(
    "/results",
    response_model=ResultsResponse,
    response_model_exclude_none=True,
)
def list_results(
    query: ResultsQuery = Depends(results_query_params),
    service: ResultQueryService = Depends(get_query_service),
) -> ResultsResponse:
    """List scan results with filters, sorting, pagination and a summary."""
    return service.get_results(query)


@router.get(
    "/scans/{id}/results",
    response_model=ResultsResponse,
    response_model_exclude_none=True,
)
def list_scan_results(
    id: str,
    query: ResultsQuery = Depends(results_query_params),
    service: ResultQueryService = Depends(get_query_service),
) -> ResultsResponse:
    """
    List the results of a single scan.

    Filter lists may also be given comma-separated (``severityFilters=critical,serious``).
    """
    pinned = build_results_query(
        **query.model_dump(
            exclude={"scan_id", "project_id", "severity_filters", "compliance_filters"}
        ),
        scan_id=id,
        severity_filters=_split_csv(query.severity_filters),
        compliance_filters=_split_csv(query.compliance_filters),
    )
    return service.get_results(pinned)


@router.get(
    "/results/export",
    response_model=None,
)
def export_results(
    query: ResultsQuery = Depends(results_query_params),
    format: Literal["html", "json"] = Query("html"),
    deduplicate: bool = Query(False),
    service: ResultQueryService = Depends(get_query_service),
) -> Union[Response, ExportResponse]:
    """
    Export every matching result as an HTML report or JSON.

    Pagination parameters are ignored; ``deduplicate`` only applies to
    project-wide exports.
    """
    export = service.export(query, deduplicate=deduplicate)
    logs.info(
        "Export generated",
        "api",
        {"format": format, "results": export.total_results},
    )

    if format == "json":
        return export

    html = render_html_report(export, query)
    return Response(
        content=html,
        media_type="text/html",
        headers={"Content-Disposition": 'attachment; filename="accessibility-report.html"'},
    )


@router.get("/stats", response_model=DashboardStats)
def get_stats(
    service: DashboardStatsService = Depends(get_stats_service),
) -> DashboardStats:
    """Dashboard issue totals per project over completed scans."""
    return service.get_stats()
