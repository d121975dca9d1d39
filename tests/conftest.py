"""Shared fixtures for the Devtul results test suite."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from backend.app.core.database import create_db_engine
from backend.app.features.results.models import (
    ProjectRecord,
    ScanRecord,
    ScanResultRecord,
    ScanStatus,
    ScanType,
    Severity,
)
from backend.app.features.results.routes import get_result_store
from backend.app.features.results.store import MemoryResultStore, SqlResultStore
from backend.app.main import create_app

T0 = datetime(2025, 7, 19, 9, 0, 0)


def make_result(id, scan_id, severity, minutes=0, **fields):
    """Build a result record with sensible defaults."""
    created = T0 + timedelta(minutes=minutes)
    defaults = dict(
        url="https://example.com/",
        message=f"Finding {id}",
        tags=[],
        scan_type=ScanType.WCAG,
    )
    defaults.update(fields)
    return ScanResultRecord(
        id=id,
        scan_id=scan_id,
        severity=severity,
        created_at=created,
        updated_at=created,
        **defaults,
    )


# ---------------------------------------------------------------------------
# Seed data: two projects, four scans, nine findings (one resolved)
# ---------------------------------------------------------------------------

PROJECTS = [
    ProjectRecord(id="p1", name="Marketing Site", organization_id="org1"),
    ProjectRecord(id="p2", name="Docs", organization_id="org1"),
]

SCANS = [
    ScanRecord(id="s1", project_id="p1", scan_type=ScanType.WCAG,
               status=ScanStatus.COMPLETED, started_at=T0),
    ScanRecord(id="s2", project_id="p1", scan_type=ScanType.SECURITY,
               status=ScanStatus.COMPLETED, started_at=T0 + timedelta(hours=1)),
    ScanRecord(id="s3", project_id="p2", scan_type=ScanType.ACCESSIBILITY,
               status=ScanStatus.COMPLETED, started_at=T0 + timedelta(hours=2)),
    ScanRecord(id="s4", project_id="p2", scan_type=ScanType.WCAG,
               status=ScanStatus.RUNNING, started_at=T0 + timedelta(hours=3)),
]

RESULTS = [
    make_result("r1", "s1", Severity.CRITICAL, 1,
                message="Images must have alternate text",
                element="img.hero", help="Add an alt attribute",
                tags=["wcag2a", "wcag111"]),
    make_result("r2", "s1", Severity.HIGH, 2,
                url="https://example.com/about",
                message="Elements must have sufficient color contrast",
                element="p.subtitle", tags=["wcag2aa", "wcag143"]),
    make_result("r3", "s1", Severity.MEDIUM, 3,
                url="https://example.com/about",
                message="Heading levels should only increase by one",
                element="h4", tags=["best-practice"]),
    make_result("r4", "s2", Severity.CRITICAL, 4,
                url="https://example.com/login",
                message="Reflected XSS vulnerability in search parameter",
                help="Encode user input before rendering",
                tags=["xss", "injection", "reflected"],
                scan_type=ScanType.SECURITY, category="xss",
                details={"parameter": "q"}),
    make_result("r5", "s2", Severity.HIGH, 5,
                message="Missing Content-Security-Policy header",
                tags=["csp", "headers"],
                scan_type=ScanType.SECURITY, category="headers"),
    make_result("r6", "s2", Severity.INFO, 6,
                message="Server version disclosed",
                tags=["info-leak"],
                scan_type=ScanType.SECURITY, category="info-leak"),
    make_result("r7", "s3", Severity.LOW, 7,
                url="https://docs.example.com/",
                message="Form elements must have labels",
                element="input#email", tags=["wcag2a", "section508"],
                scan_type=ScanType.ACCESSIBILITY),
    make_result("r8", "s3", Severity.MEDIUM, 8,
                url="https://docs.example.com/guide",
                message="ARIA role must be appropriate",
                tags=["wcag2a"], scan_type=ScanType.ACCESSIBILITY,
                is_resolved=True),
    make_result("r9", "s4", Severity.HIGH, 9,
                url="https://docs.example.com/",
                message="Links must have discernible text",
                element="a.nav", tags=["wcag2a", "wcag244"]),
]


def seed(store):
    for project in PROJECTS:
        store.add_project(project)
    for scan in SCANS:
        store.add_scan(scan)
    for result in RESULTS:
        store.add_result(result)
    return store


@pytest.fixture
def result_factory():
    return make_result


@pytest.fixture
def memory_store():
    return seed(MemoryResultStore())


@pytest.fixture
def sql_store():
    engine = create_db_engine("sqlite://", echo=False)
    store = SqlResultStore(engine)
    store.create_tables()
    seed(store)
    yield store
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every seeded store implementation, so both answer the same queries."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def client(sql_store):
    app = create_app()
    app.dependency_overrides[get_result_store] = lambda: sql_store
    with TestClient(app) as test_client:
        yield test_client
