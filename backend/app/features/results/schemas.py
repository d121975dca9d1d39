"""API request/response schemas for scan results."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

import pydantic
from pydantic import Field, field_validator

from backend.app.core import ValidationError, settings
from .models import CamelModel, ScanResultView, Summary


class ResultsQuery(CamelModel):
    """Filter, sort and pagination state for a results listing."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE, ge=1)
    sort_by: str = "severity"
    search: str = ""
    project_id: Optional[str] = None
    scan_id: Optional[str] = None
    urls: List[str] = Field(default_factory=list)
    severity_filters: List[str] = Field(default_factory=list)
    compliance_filters: List[str] = Field(default_factory=list)
    scan_type_filters: List[str] = Field(default_factory=list)
    category_filters: List[str] = Field(default_factory=list)
    include_resolved: bool = False

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v > settings.MAX_PAGE_SIZE:
            raise ValueError(f"pageSize must be at most {settings.MAX_PAGE_SIZE}")
        return v

    @field_validator("sort_by", mode="before")
    @classmethod
    def default_sort(cls, v: Optional[str]) -> str:
        # Unrecognised values are kept; ordering falls back to newest first
        return v or "severity"

    @field_validator("search", mode="before")
    @classmethod
    def normalize_search(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("project_id", "scan_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator(
        "urls",
        "severity_filters",
        "compliance_filters",
        "scan_type_filters",
        "category_filters",
        mode="before",
    )
    @classmethod
    def drop_blank_entries(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [str(item).strip() for item in v if item is not None and str(item).strip()]


def build_results_query(**params: Any) -> ResultsQuery:
    """Validate raw parameters into a ResultsQuery.

    Raises:
        ValidationError: If any parameter is malformed
    """
    try:
        return ResultsQuery(**params)
    except pydantic.ValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError("Invalid results query", details={"errors": errors})


class ResultsResponse(CamelModel):
    """One page of results plus counts over the full filtered set."""

    results: List[ScanResultView]
    summary: Summary
    total_pages: int
    total_results: int


class ErrorResponse(CamelModel):
    error: str
    success: Literal[False] = False
    details: Optional[Dict[str, Any]] = None


class ExportResponse(CamelModel):
    results: List[ScanResultView]
    total_results: int
    deduplicated: bool = False


class ProjectStats(CamelModel):
    id: str
    name: str
    total_issues: int
    critical_issues: int
    serious_issues: int
    moderate_issues: int
    minor_issues: int
    estimated_time: str
    last_scan: Optional[datetime] = None


class StatsOverview(CamelModel):
    total_projects: int
    total_scans: int
    total_issues: int
    critical_issues: int
    serious_issues: int
    moderate_issues: int
    minor_issues: int
    total_estimated_time: str
    average_issues_per_project: float
    last_scan_date: Optional[datetime] = None


class DashboardStats(CamelModel):
    overview: StatsOverview
    projects: List[ProjectStats]
