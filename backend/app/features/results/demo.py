"""Sample data set for trying the CLI without a database."""

from datetime import datetime, timedelta

from .models import ProjectRecord, ScanRecord, ScanResultRecord, ScanStatus, ScanType, Severity
from .store import MemoryResultStore

DEMO_STARTED_AT = datetime(2025, 1, 6, 9, 0, 0)


def _finding(id: str, scan: ScanRecord, severity: Severity, offset: int, **fields) -> ScanResultRecord:
    created = scan.started_at + timedelta(minutes=offset)
    return ScanResultRecord(
        id=id,
        scan_id=scan.id,
        severity=severity,
        scan_type=scan.scan_type,
        created_at=created,
        updated_at=created,
        **fields,
    )


def build_demo_store() -> MemoryResultStore:
    """An in-memory store with one project and a WCAG and a security scan."""
    store = MemoryResultStore()
    project = store.add_project(ProjectRecord(id="demo", name="Demo Shop"))

    wcag = store.add_scan(
        ScanRecord(
            id="demo-wcag",
            project_id=project.id,
            scan_type=ScanType.WCAG,
            status=ScanStatus.COMPLETED,
            started_at=DEMO_STARTED_AT,
            completed_at=DEMO_STARTED_AT + timedelta(minutes=4),
        )
    )
    security = store.add_scan(
        ScanRecord(
            id="demo-security",
            project_id=project.id,
            scan_type=ScanType.SECURITY,
            status=ScanStatus.COMPLETED,
            started_at=DEMO_STARTED_AT + timedelta(hours=1),
            completed_at=DEMO_STARTED_AT + timedelta(hours=1, minutes=2),
        )
    )

    findings = [
        _finding("demo-1", wcag, Severity.CRITICAL, 1,
                 url="https://shop.example.com/",
                 message="Images must have alternate text",
                 element="img.product-hero", help="Add an alt attribute",
                 tags=["wcag2a", "wcag111"]),
        _finding("demo-2", wcag, Severity.HIGH, 2,
                 url="https://shop.example.com/cart",
                 message="Elements must have sufficient color contrast",
                 element="button.checkout", tags=["wcag2aa", "wcag143"]),
        _finding("demo-3", wcag, Severity.LOW, 3,
                 url="https://shop.example.com/cart",
                 message="Landmarks should have a unique role",
                 tags=["best-practice"]),
        _finding("demo-4", wcag, Severity.MEDIUM, 4,
                 url="https://shop.example.com/",
                 message="Heading levels should only increase by one",
                 element="h4.teaser", tags=["best-practice"],
                 is_resolved=True),
        _finding("demo-5", security, Severity.HIGH, 1,
                 url="https://shop.example.com/",
                 message="Missing Strict-Transport-Security header",
                 tags=["headers", "tls"], category="headers"),
        _finding("demo-6", security, Severity.INFO, 2,
                 url="https://shop.example.com/",
                 message="Server version disclosed in response headers",
                 tags=["info-leak"], category="info-leak"),
    ]
    for finding in findings:
        store.add_result(finding)
    return store
