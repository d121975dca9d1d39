"""SQLAlchemy-backed result store."""

from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from backend.app.core import StoreError, logs
from backend.app.core.database import create_session_factory, init_db
from ..models import ProjectRecord, ScanRecord, ScanResultRecord
from ..predicates import (
    Condition,
    FieldEquals,
    FieldIn,
    Ordering,
    Predicate,
    ProjectScope,
    ScanStatusIn,
    SortKey,
    TagsOverlap,
    TextSearch,
)
from ..severity import SEVERITY_RANK, UNKNOWN_SEVERITY_RANK
from ..tables import ProjectRow, ScanResultRow, ScanResultTagRow, ScanRow
from .base import ResultStore

_SEVERITY_RANK_EXPR = case(
    SEVERITY_RANK, value=ScanResultRow.severity, else_=UNKNOWN_SEVERITY_RANK
)


def _clause(condition: Condition):
    """Translate one condition into a SQL expression on scan_results."""
    if isinstance(condition, FieldEquals):
        return getattr(ScanResultRow, condition.field) == condition.value
    if isinstance(condition, FieldIn):
        return getattr(ScanResultRow, condition.field).in_(condition.values)
    if isinstance(condition, TagsOverlap):
        return ScanResultRow.tags.any(ScanResultTagRow.tag.in_(condition.tags))
    if isinstance(condition, TextSearch):
        return or_(
            *(
                getattr(ScanResultRow, f).icontains(condition.term, autoescape=True)
                for f in condition.fields
            )
        )
    if isinstance(condition, ProjectScope):
        return ScanResultRow.scan.has(ScanRow.project_id == condition.project_id)
    if isinstance(condition, ScanStatusIn):
        return ScanResultRow.scan.has(ScanRow.status.in_(condition.statuses))
    raise TypeError(f"Unsupported condition: {condition!r}")


def _order_term(key: SortKey):
    column = _SEVERITY_RANK_EXPR if key.field == "severity_rank" else getattr(ScanResultRow, key.field)
    return column.desc() if key.descending else column.asc()


def _to_record(row: ScanResultRow) -> ScanResultRecord:
    return ScanResultRecord(
        id=row.id,
        scan_id=row.scan_id,
        url=row.url,
        message=row.message,
        help=row.help,
        element=row.element,
        element_path=row.element_path,
        severity=row.severity,
        impact=row.impact,
        tags=[t.tag for t in row.tags],
        scan_type=row.scan_type,
        category=row.category,
        is_resolved=row.is_resolved,
        resolved_at=row.resolved_at,
        details=row.details or {},
        created_at=row.created_at,
        updated_at=row.updated_at,
        scan_project_id=row.scan.project_id if row.scan else None,
        scan_scan_type=row.scan.scan_type if row.scan else None,
    )


class SqlResultStore(ResultStore):
    """Result store over a relational database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = create_session_factory(engine)

    def create_tables(self) -> None:
        init_db(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logs.error("Store operation failed", "store", exception=e)
            raise StoreError() from e
        finally:
            session.close()

    def count(self, predicate: Predicate) -> int:
        stmt = select(func.count()).select_from(ScanResultRow).where(
            *(_clause(c) for c in predicate)
        )
        with self._session() as session:
            return session.execute(stmt).scalar_one()

    def find_many(
        self,
        predicate: Predicate,
        ordering: Ordering = (),
        skip: int = 0,
        take: Optional[int] = None,
    ) -> List[ScanResultRecord]:
        stmt = (
            select(ScanResultRow)
            .options(joinedload(ScanResultRow.scan))
            .where(*(_clause(c) for c in predicate))
            .order_by(*(_order_term(k) for k in ordering))
            .offset(skip)
        )
        if take is not None:
            stmt = stmt.limit(take)
        with self._session() as session:
            rows = session.execute(stmt).unique().scalars().all()
            return [_to_record(row) for row in rows]

    def severity_counts(self, predicate: Predicate) -> Dict[str, int]:
        stmt = (
            select(ScanResultRow.severity, func.count())
            .where(*(_clause(c) for c in predicate))
            .group_by(ScanResultRow.severity)
        )
        with self._session() as session:
            return {severity: n for severity, n in session.execute(stmt).all()}

    def list_projects(self) -> List[ProjectRecord]:
        with self._session() as session:
            rows = session.execute(select(ProjectRow).order_by(ProjectRow.name)).scalars()
            return [
                ProjectRecord(id=p.id, name=p.name, organization_id=p.organization_id)
                for p in rows
            ]

    def list_scans(
        self,
        project_id: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> List[ScanRecord]:
        stmt = select(ScanRow).order_by(ScanRow.started_at.desc())
        if project_id is not None:
            stmt = stmt.where(ScanRow.project_id == project_id)
        if statuses is not None:
            stmt = stmt.where(ScanRow.status.in_(list(statuses)))
        with self._session() as session:
            return [
                ScanRecord(
                    id=s.id,
                    project_id=s.project_id,
                    scan_type=s.scan_type,
                    status=s.status,
                    started_at=s.started_at,
                    completed_at=s.completed_at,
                )
                for s in session.execute(stmt).scalars()
            ]

    # Seeding helpers; production rows are written by the scan pipeline

    def add_project(self, project: ProjectRecord) -> ProjectRecord:
        with self._session() as session:
            session.add(
                ProjectRow(
                    id=project.id,
                    name=project.name,
                    organization_id=project.organization_id,
                )
            )
        return project

    def add_scan(self, scan: ScanRecord) -> ScanRecord:
        with self._session() as session:
            session.add(
                ScanRow(
                    id=scan.id,
                    project_id=scan.project_id,
                    scan_type=scan.scan_type.value,
                    status=scan.status.value,
                    started_at=scan.started_at,
                    completed_at=scan.completed_at,
                )
            )
        return scan

    def add_result(self, result: ScanResultRecord) -> ScanResultRecord:
        with self._session() as session:
            session.add(
                ScanResultRow(
                    id=result.id,
                    scan_id=result.scan_id,
                    url=result.url,
                    message=result.message,
                    help=result.help,
                    element=result.element,
                    element_path=result.element_path,
                    severity=result.severity.value,
                    impact=result.impact,
                    scan_type=result.scan_type.value,
                    category=result.category,
                    is_resolved=result.is_resolved,
                    resolved_at=result.resolved_at,
                    details=result.details,
                    created_at=result.created_at,
                    updated_at=result.updated_at,
                    tags=[ScanResultTagRow(tag=tag) for tag in dict.fromkeys(result.tags)],
                )
            )
        return result
