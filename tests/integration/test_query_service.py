"""ResultQueryService against the in-memory and SQL stores."""

import math
import random

import pytest

from backend.app.core import ConfigurationInconsistencyError, ResultsFetchError
from backend.app.features.results.models import ProjectRecord, ScanRecord, ScanType, Severity
from backend.app.features.results.schemas import build_results_query
from backend.app.features.results.services import ResultQueryService
from backend.app.features.results.severity import severity_rank
from backend.app.features.results.store import MemoryResultStore


def run(store, category_mode="direct", **params):
    return ResultQueryService(store, category_mode=category_mode).get_results(
        build_results_query(**params)
    )


def ids(response):
    return [r.id for r in response.results]


class TestSummary:
    def test_summary_covers_full_filtered_set(self, store):
        response = run(store, page_size=2)
        assert len(response.results) == 2
        assert response.total_results == 8
        assert response.summary.model_dump() == {
            "total": 8, "critical": 2, "serious": 3, "moderate": 1, "minor": 1, "info": 1,
        }

    def test_summary_total_matches_bucket_sum(self, store):
        s = run(store, include_resolved=True).summary
        assert s.total == s.critical + s.serious + s.moderate + s.minor + s.info == 9

    def test_summary_follows_filters(self, store):
        response = run(store, severity_filters=["serious"])
        assert response.summary.total == response.total_results == 3
        assert response.summary.serious == 3
        assert response.summary.critical == 0


class TestPagination:
    @pytest.mark.parametrize("page_size", [1, 3, 4, 5, 8, 10])
    def test_total_pages_and_last_page(self, store, page_size):
        first = run(store, page_size=page_size)
        assert first.total_pages == math.ceil(first.total_results / page_size)
        last = run(store, page_size=page_size, page=first.total_pages)
        expected = first.total_results - (first.total_pages - 1) * page_size
        assert len(last.results) == expected

    def test_pages_do_not_overlap(self, store):
        seen = []
        for page in (1, 2, 3):
            seen.extend(ids(run(store, page_size=3, page=page)))
        assert sorted(seen) == sorted(set(seen))
        assert len(seen) == 8

    def test_page_past_end_is_empty(self, store):
        response = run(store, page=5, page_size=5)
        assert response.results == []
        assert response.total_results == 8

    def test_no_matches(self, store):
        response = run(store, search="nothing matches this")
        assert response.total_results == 0
        assert response.total_pages == 0
        assert response.summary.total == 0


class TestOrdering:
    def test_severity_order_with_tie_breaks(self, store):
        assert ids(run(store, page_size=10)) == ["r4", "r1", "r9", "r5", "r2", "r3", "r7", "r6"]

    def test_url_ascending(self, store):
        urls = [r.url for r in run(store, sort_by="url", page_size=10).results]
        assert urls == sorted(urls)
        assert urls[0] == "https://docs.example.com/"

    def test_date_newest_first(self, store):
        dates = [r.created_at for r in run(store, sort_by="date", page_size=10).results]
        assert dates == sorted(dates, reverse=True)

    def test_unknown_sort_is_newest_first(self, store):
        assert ids(run(store, sort_by="popularity", page_size=10)) == ids(
            run(store, sort_by="date", page_size=10)
        )

    def test_severity_rank_ignores_insertion_order(self, result_factory):
        memory = MemoryResultStore()
        memory.add_project(ProjectRecord(id="p", name="P"))
        memory.add_scan(ScanRecord(id="s", project_id="p", scan_type=ScanType.WCAG,
                                   started_at=result_factory("x", "s", "Info").created_at))
        severities = [s for s in Severity for _ in range(3)]
        random.Random(7).shuffle(severities)
        for i, severity in enumerate(severities):
            memory.add_result(result_factory(f"r{i}", "s", severity, i))

        ranks = [severity_rank(r.severity) for r in run(memory, page_size=15).results]
        assert all(a <= b for a, b in zip(ranks, ranks[1:]))


class TestFilters:
    def test_severity_scenario(self, result_factory):
        memory = MemoryResultStore()
        memory.add_project(ProjectRecord(id="p", name="P"))
        memory.add_scan(ScanRecord(id="s", project_id="p", scan_type=ScanType.WCAG,
                                   started_at=result_factory("x", "s", "Info").created_at))
        severities = ["High", "Medium", "Critical", "High", "Critical", "Critical"]
        for i, severity in enumerate(severities):
            memory.add_result(result_factory(f"r{i}", "s", severity, i))

        response = run(memory, severity_filters=["critical", "serious"],
                       sort_by="severity", page=1, page_size=2)
        assert [r.severity for r in response.results] == [Severity.CRITICAL, Severity.CRITICAL]
        assert response.total_results == 5
        assert response.total_pages == 3
        assert response.summary.model_dump() == {
            "total": 5, "critical": 3, "serious": 2, "moderate": 0, "minor": 0, "info": 0,
        }

    def test_search_is_case_insensitive(self, store):
        assert ids(run(store, search="xss")) == ["r4"]

    def test_search_matches_element_and_help(self, store):
        assert ids(run(store, search="IMG.HERO")) == ["r1"]
        assert ids(run(store, search="encode user input")) == ["r4"]

    def test_search_matches_url(self, store):
        assert set(ids(run(store, search="/login"))) == {"r4"}

    def test_search_treats_wildcards_literally(self, store):
        assert run(store, search="%").total_results == 0

    def test_search_folds_non_ascii_case(self, store, result_factory):
        store.add_result(result_factory("u1", "s1", "Medium", 30, message="Überschrift fehlt"))
        assert ids(run(store, search="überschrift")) == ["u1"]
        assert ids(run(store, search="ÜBERSCHRIFT")) == ["u1"]

    def test_search_term_is_not_trimmed(self, store):
        assert run(store, search="xss  ").total_results == 0
        assert ids(run(store, search="Reflected XSS ")) == ["r4"]

    def test_scan_id_wins_over_project_id(self, store):
        response = run(store, scan_id="s2", project_id="p2", page_size=10)
        assert set(ids(response)) == {"r4", "r5", "r6"}

    def test_project_scope(self, store):
        assert run(store, project_id="p1").total_results == 6
        assert set(ids(run(store, project_id="p2"))) == {"r7", "r9"}

    def test_compliance_tags_overlap(self, store):
        assert set(ids(run(store, compliance_filters=["wcag2a"]))) == {"r1", "r7", "r9"}
        assert set(ids(run(store, compliance_filters=["wcag143", "csp"]))) == {"r2", "r5"}

    def test_scan_type_tokens(self, store):
        assert set(ids(run(store, scan_type_filters=["security"]))) == {"r4", "r5", "r6"}
        assert set(ids(run(store, scan_type_filters=["accessibility"]))) == {"r7"}
        assert run(store, scan_type_filters=["ssl"]).total_results == 0

    def test_category_direct_match(self, store):
        assert ids(run(store, category_filters=["headers"])) == ["r5"]

    def test_category_severity_range(self, store):
        response = run(store, category_mode="severity_range", category_filters=["headers"])
        assert set(ids(response)) == {"r2", "r3", "r5", "r9"}

    def test_category_modes_are_not_combined(self, store):
        with pytest.raises(ConfigurationInconsistencyError):
            run(store, category_mode="severity_range",
                category_filters=["headers"], severity_filters=["critical"])

    def test_url_filter(self, store):
        response = run(store, urls=["https://example.com/about"])
        assert set(ids(response)) == {"r2", "r3"}

    def test_filters_combine_with_and(self, store):
        response = run(store, project_id="p1", severity_filters=["critical"],
                       scan_type_filters=["security"])
        assert ids(response) == ["r4"]


class TestResolution:
    def test_resolved_excluded_by_default(self, store):
        response = run(store, page_size=20)
        assert "r8" not in ids(response)

    def test_include_resolved(self, store):
        response = run(store, include_resolved=True, page_size=20)
        assert "r8" in ids(response)
        assert response.total_results == 9


class TestShaping:
    def test_display_scan_type_and_category(self, store):
        views = {r.id: r for r in run(store, page_size=10).results}
        assert views["r4"].scan_type == "security"
        assert views["r4"].category == "critical"
        assert views["r1"].scan_type == "wcag"
        assert views["r7"].scan_type == "wcag"
        assert views["r2"].category == "serious"
        assert views["r6"].category == "info"

    def test_payload_passes_through(self, store):
        view = run(store, scan_id="s2", severity_filters=["critical"]).results[0]
        assert view.details == {"parameter": "q"}
        assert set(view.tags) == {"xss", "injection", "reflected"}
        assert view.element is None


class FailingStore(MemoryResultStore):
    def count(self, predicate):
        raise RuntimeError("connection refused: db.internal:5432")


class TestStoreFailure:
    def test_store_errors_become_generic_failure(self):
        with pytest.raises(ResultsFetchError) as exc:
            run(FailingStore())
        assert exc.value.message == "Failed to fetch accessibility results"
        assert "db.internal" not in exc.value.message
        assert exc.value.status_code == 500
