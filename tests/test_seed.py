from __future__ import annotations

from recruit_core.seed import load_reports, load_results


def test_seed_results():
    results = load_results()
    assert [r.id for r in results] == ["r001", "r002", "r003"]
    assert results[0].areas_for_improvement[0] == "Could add more comprehensive testing"


def test_seed_reports_are_derived_from_results():
    results = load_results()
    reports = {r.id: r for r in load_reports(results)}
    cr001 = reports["cr001"]
    assert [r.id for r in cr001.assessment_results] == ["r001", "r002"]
    assert cr001.created_at == "2024-03-15T10:30:00Z"
    assert cr001.updated_at == "2024-03-16T14:55:00Z"
    assert cr001.overall_score == 89
    assert cr001.recommendation == "Highly Recommended"
    cr002 = reports["cr002"]
    assert [r.id for r in cr002.assessment_results] == ["r003"]
    assert cr002.updated_at == "2024-03-17T11:15:00Z"


def test_seed_reports_without_results_are_skipped():
    results = [r for r in load_results() if r.candidate_id != "c002"]
    assert [r.id for r in load_reports(results)] == ["cr001"]
