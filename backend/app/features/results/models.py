"""Data models for scan results."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Internal severity levels, most urgent first."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    INFO = "Info"


class ScanType(str, Enum):
    """Kinds of automated scan that produce results."""

    SEO = "SEO"
    WCAG = "WCAG"
    SECURITY = "Security"
    SSLTLS = "SSLTLS"
    PERFORMANCE = "Performance"
    UPTIME = "Uptime"
    ACCESSIBILITY = "Accessibility"
    SEO_AUDIT = "SEO_AUDIT"
    SECURITY_AUDIT = "SECURITY_AUDIT"
    PERFORMANCE_AUDIT = "PERFORMANCE_AUDIT"


class ScanStatus(str, Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"
    CANCELED = "Canceled"


class ProjectRecord(BaseModel):
    id: str
    name: str
    organization_id: Optional[str] = None


class ScanRecord(BaseModel):
    """One execution of a scan against a project."""

    id: str
    project_id: str
    scan_type: ScanType
    status: ScanStatus = ScanStatus.COMPLETED
    started_at: datetime
    completed_at: Optional[datetime] = None


class ScanResultRecord(BaseModel):
    """A stored finding together with the fields of its owning scan."""

    id: str
    scan_id: str
    url: str
    message: str
    help: Optional[str] = None
    element: Optional[str] = None
    element_path: Optional[str] = None
    severity: Severity
    impact: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    scan_type: ScanType
    category: Optional[str] = None
    is_resolved: bool = False
    resolved_at: Optional[datetime] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    # Owning scan (joined)
    scan_project_id: Optional[str] = None
    scan_scan_type: Optional[ScanType] = None


class CamelModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScanResultView(CamelModel):
    """A result row as returned to clients.

    ``scan_type`` is the two-way display simplification of the owning scan's
    type, and ``category`` is the display severity (not the stored category).
    """

    id: str
    scan_id: str
    url: str
    message: str
    element: Optional[str] = None
    severity: Severity
    impact: Optional[str] = None
    help: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    element_path: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime
    scan_type: Literal["security", "wcag"]
    category: str
    estimated_fix_time: Optional[str] = None


class Summary(CamelModel):
    """Per-severity counts over a whole filtered result set."""

    total: int = 0
    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0
    info: int = 0
