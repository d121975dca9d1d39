"""Tests for results query validation, predicate and ordering construction."""

import pytest

from backend.app.core import ConfigurationInconsistencyError, ValidationError, settings
from backend.app.features.results.predicates import (
    FieldEquals,
    FieldIn,
    ProjectScope,
    SortKey,
    TagsOverlap,
    TextSearch,
    build_ordering,
    build_predicate,
)
from backend.app.features.results.schemas import build_results_query


class TestResultsQueryValidation:
    def test_defaults(self):
        query = build_results_query()
        assert query.page == 1
        assert query.page_size == 10
        assert query.sort_by == "severity"
        assert query.search == ""
        assert query.include_resolved is False
        assert query.severity_filters == []

    def test_page_size_default_follows_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "DEFAULT_PAGE_SIZE", 25)
        assert build_results_query().page_size == 25

    def test_search_kept_as_given(self):
        assert build_results_query(search="  contrast ").search == "  contrast "
        assert build_results_query(search=None).search == ""

    def test_accepts_camel_case_keys(self):
        query = build_results_query(pageSize=25, severityFilters=["critical"], includeResolved=True)
        assert query.page_size == 25
        assert query.severity_filters == ["critical"]
        assert query.include_resolved is True

    def test_blank_ids_become_absent(self):
        query = build_results_query(project_id="", scan_id="  ")
        assert query.project_id is None
        assert query.scan_id is None

    def test_blank_filter_entries_dropped(self):
        query = build_results_query(severity_filters=["critical", "", "  "])
        assert query.severity_filters == ["critical"]

    def test_empty_sort_falls_back_to_severity(self):
        assert build_results_query(sort_by="").sort_by == "severity"

    @pytest.mark.parametrize("params", [{"page": 0}, {"page_size": 0}, {"page": "abc"}])
    def test_malformed_pagination_rejected(self, params):
        with pytest.raises(ValidationError) as exc:
            build_results_query(**params)
        assert exc.value.status_code == 400
        assert exc.value.details["errors"]

    def test_page_size_capped(self):
        with pytest.raises(ValidationError):
            build_results_query(page_size=settings.MAX_PAGE_SIZE + 1)


class TestBuildPredicate:
    def test_default_only_excludes_resolved(self):
        assert build_predicate(build_results_query()) == (FieldEquals("is_resolved", False),)

    def test_include_resolved_drops_condition(self):
        assert build_predicate(build_results_query(include_resolved=True)) == ()

    def test_scan_id_takes_precedence_over_project(self):
        predicate = build_predicate(build_results_query(scan_id="s2", project_id="p2"))
        assert FieldEquals("scan_id", "s2") in predicate
        assert not any(isinstance(c, ProjectScope) for c in predicate)

    def test_project_scope(self):
        predicate = build_predicate(build_results_query(project_id="p1"))
        assert ProjectScope("p1") in predicate

    def test_search_covers_text_fields(self):
        predicate = build_predicate(build_results_query(search="xss"))
        assert TextSearch("xss", ("message", "url", "element", "help")) in predicate

    def test_severity_filters_translated(self):
        predicate = build_predicate(build_results_query(severity_filters=["critical", "serious"]))
        assert FieldIn("severity", ("Critical", "High")) in predicate

    def test_compliance_filters_are_tag_overlap(self):
        predicate = build_predicate(build_results_query(compliance_filters=["wcag2a", "wcag2aa"]))
        assert TagsOverlap(("wcag2a", "wcag2aa")) in predicate

    def test_scan_type_filters_translated(self):
        predicate = build_predicate(build_results_query(scan_type_filters=["ssl", "security"]))
        assert FieldIn("scan_type", ("SSLTLS", "Security")) in predicate

    def test_url_filter(self):
        predicate = build_predicate(build_results_query(urls=["https://example.com/"]))
        assert FieldIn("url", ("https://example.com/",)) in predicate


class TestCategoryFilterModes:
    def test_direct_mode_matches_category_field(self):
        query = build_results_query(category_filters=["headers", "xss"])
        predicate = build_predicate(query, category_mode="direct")
        assert FieldIn("category", ("headers", "xss")) in predicate
        assert not any(isinstance(c, FieldIn) and c.field == "severity" for c in predicate)

    def test_severity_range_mode_expands_categories(self):
        query = build_results_query(category_filters=["headers", "xss"])
        predicate = build_predicate(query, category_mode="severity_range")
        assert FieldIn("severity", ("Critical", "High", "Medium")) in predicate
        assert not any(isinstance(c, FieldIn) and c.field == "category" for c in predicate)

    def test_severity_range_mode_refuses_explicit_severities(self):
        query = build_results_query(category_filters=["headers"], severity_filters=["minor"])
        with pytest.raises(ConfigurationInconsistencyError):
            build_predicate(query, category_mode="severity_range")

    def test_direct_mode_allows_both(self):
        query = build_results_query(category_filters=["headers"], severity_filters=["minor"])
        predicate = build_predicate(query, category_mode="direct")
        assert FieldIn("severity", ("Low",)) in predicate
        assert FieldIn("category", ("headers",)) in predicate

    def test_severity_range_mode_rejects_unknown_category(self):
        query = build_results_query(category_filters=["typography"])
        with pytest.raises(ValidationError):
            build_predicate(query, category_mode="severity_range")


class TestBuildOrdering:
    def test_severity_uses_rank(self):
        assert build_ordering("severity")[0] == SortKey("severity_rank")

    def test_url_ascending(self):
        assert build_ordering("url")[0] == SortKey("url")

    def test_date_newest_first(self):
        assert build_ordering("date")[0] == SortKey("created_at", descending=True)

    def test_unknown_falls_back_to_date(self):
        assert build_ordering("popularity") == build_ordering("date")
