"""Base class for result stores."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..models import ProjectRecord, ScanRecord, ScanResultRecord
from ..predicates import Ordering, Predicate


class ResultStore(ABC):
    """Read access to projects, scans and scan results.

    Implementations raise ``StoreError`` when the backing store fails.
    """

    @abstractmethod
    def count(self, predicate: Predicate) -> int:
        """Number of results matching every condition."""

    @abstractmethod
    def find_many(
        self,
        predicate: Predicate,
        ordering: Ordering = (),
        skip: int = 0,
        take: Optional[int] = None,
    ) -> List[ScanResultRecord]:
        """
        Fetch matching results.

        Args:
            predicate: Conditions to AND together
            ordering: Sort keys applied before skip/take
            skip: Rows to skip after sorting
            take: Maximum rows to return; None returns all

        Returns:
            Results with their owning scan's project and type filled in
        """

    @abstractmethod
    def severity_counts(self, predicate: Predicate) -> Dict[str, int]:
        """Count of matching results keyed by internal severity."""

    @abstractmethod
    def list_projects(self) -> List[ProjectRecord]:
        pass

    @abstractmethod
    def list_scans(
        self,
        project_id: Optional[str] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> List[ScanRecord]:
        """Scans, newest ``started_at`` first."""
