"""Store-neutral predicates and orderings for result queries.

A ``Predicate`` is a tuple of conditions ANDed together. Each store
translates the conditions into its own query form, so the filter rules
live here once instead of in every backend.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from backend.app.core import ConfigurationInconsistencyError, ValidationError, settings
from .schemas import ResultsQuery
from .severity import category_severities, to_internal, to_scan_type

SEARCH_FIELDS: Tuple[str, ...] = ("message", "url", "element", "help")


@dataclass(frozen=True)
class FieldEquals:
    field: str
    value: object


@dataclass(frozen=True)
class FieldIn:
    """Membership test: the field equals one of ``values``."""

    field: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class TagsOverlap:
    """At least one of the result's tags is in ``tags``."""

    tags: Tuple[str, ...]


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match on any of ``fields``."""

    term: str
    fields: Tuple[str, ...] = SEARCH_FIELDS


@dataclass(frozen=True)
class ProjectScope:
    """The owning scan belongs to ``project_id``."""

    project_id: str


@dataclass(frozen=True)
class ScanStatusIn:
    """The owning scan's status is one of ``statuses``."""

    statuses: Tuple[str, ...]


Condition = Union[FieldEquals, FieldIn, TagsOverlap, TextSearch, ProjectScope, ScanStatusIn]
Predicate = Tuple[Condition, ...]


@dataclass(frozen=True)
class SortKey:
    """One ordering term. ``severity_rank`` sorts by urgency, not by name."""

    field: Literal["severity_rank", "url", "created_at", "id"]
    descending: bool = False


Ordering = Tuple[SortKey, ...]

# Ties break on newest first, then id, so pages never overlap
_TIE_BREAK: Ordering = (SortKey("created_at", descending=True), SortKey("id"))

ORDERINGS = {
    "severity": (SortKey("severity_rank"),) + _TIE_BREAK,
    "url": (SortKey("url"),) + _TIE_BREAK,
    "date": _TIE_BREAK,
}


def build_ordering(sort_by: str) -> Ordering:
    """Ordering for a sortBy value; anything unrecognised sorts newest first."""
    return ORDERINGS.get(sort_by, _TIE_BREAK)


def _category_conditions(
    query: ResultsQuery, mode: str
) -> Tuple[Condition, ...]:
    if not query.category_filters:
        return ()
    if mode == "direct":
        return (FieldIn("category", tuple(query.category_filters)),)

    if query.severity_filters:
        raise ConfigurationInconsistencyError(
            "categoryFilters cannot be combined with severityFilters "
            "when categories are filtered by severity range",
            details={
                "categoryFilters": query.category_filters,
                "severityFilters": query.severity_filters,
            },
        )
    severities = set()
    for category in query.category_filters:
        implied = category_severities(category)
        if implied is None:
            raise ValidationError(
                f"Unknown category '{category}'",
                details={"categoryFilters": query.category_filters},
            )
        severities.update(s.value for s in implied)
    return (FieldIn("severity", tuple(sorted(severities))),)


def build_predicate(
    query: ResultsQuery, category_mode: Optional[str] = None
) -> Predicate:
    """
    Translate a ResultsQuery into store-neutral conditions.

    Args:
        query: Validated query
        category_mode: "direct" or "severity_range"; defaults to settings

    Returns:
        Tuple of conditions, all of which must hold

    Raises:
        ConfigurationInconsistencyError: Severity filters given in severity_range mode
        ValidationError: Unknown category in severity_range mode
    """
    mode = category_mode or settings.CATEGORY_FILTER_MODE
    conditions = []

    if query.scan_id:
        conditions.append(FieldEquals("scan_id", query.scan_id))
    elif query.project_id:
        conditions.append(ProjectScope(query.project_id))

    if query.urls:
        conditions.append(FieldIn("url", tuple(query.urls)))

    if query.search:
        conditions.append(TextSearch(query.search))

    if query.severity_filters:
        conditions.append(
            FieldIn("severity", tuple(to_internal(s) for s in query.severity_filters))
        )

    if query.compliance_filters:
        conditions.append(TagsOverlap(tuple(query.compliance_filters)))

    if query.scan_type_filters:
        conditions.append(
            FieldIn("scan_type", tuple(to_scan_type(t) for t in query.scan_type_filters))
        )

    conditions.extend(_category_conditions(query, mode))

    if not query.include_resolved:
        conditions.append(FieldEquals("is_resolved", False))

    return tuple(conditions)
