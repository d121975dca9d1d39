"""In-process result store evaluating predicates in Python."""

from typing import Any, Callable, Dict, Iterable, List, Optional

from ..models import ProjectRecord, ScanRecord, ScanResultRecord
from ..predicates import (
    Condition,
    FieldEquals,
    FieldIn,
    Ordering,
    Predicate,
    ProjectScope,
    ScanStatusIn,
    TagsOverlap,
    TextSearch,
)
from ..severity import severity_rank
from .base import ResultStore


def _field(result: ScanResultRecord, name: str) -> Any:
    value = getattr(result, name)
    return value.value if hasattr(value, "value") else value


class MemoryResultStore(ResultStore):
    """Result store holding records in dictionaries."""

    def __init__(self) -> None:
        self.projects: Dict[str, ProjectRecord] = {}
        self.scans: Dict[str, ScanRecord] = {}
        self.results: Dict[str, ScanResultRecord] = {}

    def add_project(self, project: ProjectRecord) -> ProjectRecord:
        self.projects[project.id] = project
        return project

    def add_scan(self, scan: ScanRecord) -> ScanRecord:
        self.scans[scan.id] = scan
        return scan

    def add_result(self, result: ScanResultRecord) -> ScanResultRecord:
        scan = self.scans.get(result.scan_id)
        if scan is not None:
            result = result.model_copy(
                update={
                    "scan_project_id": scan.project_id,
                    "scan_scan_type": scan.scan_type,
                }
            )
        self.results[result.id] = result
        return result

    def _matches(self, condition: Condition) -> Callable[[ScanResultRecord], bool]:
        if isinstance(condition, FieldEquals):
            return lambda r: _field(r, condition.field) == condition.value
        if isinstance(condition, FieldIn):
            allowed = set(condition.values)
            return lambda r: _field(r, condition.field) in allowed
        if isinstance(condition, TagsOverlap):
            wanted = set(condition.tags)
            return lambda r: bool(wanted.intersection(r.tags))
        if isinstance(condition, TextSearch):
            term = condition.term.lower()
            return lambda r: any(
                term in (getattr(r, f) or "").lower() for f in condition.fields
            )
        if isinstance(condition, ProjectScope):
            return lambda r: r.scan_project_id == condition.project_id
        if isinstance(condition, ScanStatusIn):
            statuses = set(condition.statuses)

            def check(r: ScanResultRecord) -> bool:
                scan = self.scans.get(r.scan_id)
                return scan is not None and scan.status.value in statuses

            return check
        raise TypeError(f"Unsupported condition: {condition!r}")

    def _filter(self, predicate: Predicate) -> List[ScanResultRecord]:
        checks = [self._matches(c) for c in predicate]
        return [r for r in self.results.values() if all(check(r) for check in checks)]

    def count(self, predicate: Predicate) -> int:
        return len(self._filter(predicate))

    def find_many(
        self,
        predicate: Predicate,
        ordering: Ordering = (),
        skip: int = 0,
        take: Optional[int] = None,
    ) -> List[ScanResultRecord]:
        rows = self._filter(predicate)
        # Stable sorts applied from the least significant key upward
        for key in reversed(ordering):
            if key.field == "severity_rank":
                rows.sort(key=lambda r: severity_rank(r.severity), reverse=key.descending)
            else:
                rows.sort(key=lambda r: getattr(r, key.field), reverse=key.descending)
        end = None if take is None else skip + take
        return rows[skip:end]

    def severity_counts(self, predicate: Predicate) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for r in self._filter(predicate):
            counts[r.severity.value] = counts.get(r.severity.value, 0) + 1
        return counts

    def list_projects(self) -> List[ProjectRecord]:
        return sorted(self.projects.values(), key=lambda p: p.name)

    def list_scans(
        self,
        project_id: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> List[ScanRecord]:
        wanted = set(statuses) if statuses is not None else None
        scans = [
            s
            for s in self.scans.values()
            if (project_id is None or s.project_id == project_id)
            and (wanted is None or s.status.value in wanted)
        ]
        return sorted(scans, key=lambda s: s.started_at, reverse=True)
