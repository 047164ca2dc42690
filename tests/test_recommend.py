from __future__ import annotations

import pytest
from pydantic import ValidationError

from recruit_core.config import GENERIC_INDUSTRY_DESCRIPTION, GENERIC_ROLE_DESCRIPTION
from recruit_core.recommend import (
    describe_industry,
    describe_role,
    key_areas,
    list_keys,
    recommend,
    recommended_template_ids,
    resolve_templates,
)


def _ids(templates):
    return [t.id for t in templates]


def test_unknown_keys_return_full_catalog_in_order(small_catalog, small_tables):
    out = resolve_templates("astronaut", "space", small_catalog, small_tables)
    assert _ids(out) == ["t1", "t2", "t3", "t4"]


def test_empty_keys_return_full_catalog(small_catalog, small_tables):
    assert _ids(resolve_templates("", "", small_catalog, small_tables)) == ["t1", "t2", "t3", "t4"]


def test_role_and_industry_overlap_keeps_first_occurrence(small_catalog, small_tables):
    out = resolve_templates("frontend-engineer", "fintech", small_catalog, small_tables)
    assert _ids(out) == ["t1", "t2"]


def test_role_ids_come_before_industry_ids(small_catalog, small_tables):
    # role: [t1, t2]; industry: [t2, t3, t404]
    out = resolve_templates("data-engineer", "retail", small_catalog, small_tables)
    assert _ids(out) == ["t1", "t2", "t3"]


def test_missing_catalog_entries_are_dropped(small_catalog, small_tables):
    assert "t404" in recommended_template_ids("", "retail", small_tables)
    out = resolve_templates("unknown-role", "retail", small_catalog, small_tables)
    assert _ids(out) == ["t2", "t3"]


def test_known_role_with_unknown_industry(small_catalog, small_tables):
    out = resolve_templates("data-engineer", "nowhere", small_catalog, small_tables)
    assert _ids(out) == ["t1", "t2"]


def test_known_key_with_nothing_in_catalog_returns_empty(small_tables):
    assert resolve_templates("frontend-engineer", "", {}, small_tables) == []


def test_seed_frontend_fintech_order(seed_catalog, seed_tables):
    out = resolve_templates("frontend-engineer", "fintech", seed_catalog, seed_tables)
    assert _ids(out) == [
        "tpl000001", "tpl000003", "tpl000005", "tpl000011", "tpl000020", "tpl000024",
        "tpl000004", "tpl000008", "tpl000010", "tpl000018", "tpl000021",
    ]


def test_resolver_does_not_mutate_inputs(small_catalog, small_tables):
    before = list(small_catalog)
    resolve_templates("data-engineer", "retail", small_catalog, small_tables)
    assert list(small_catalog) == before


def test_descriptions_and_fallbacks(small_tables):
    assert describe_role("frontend-engineer", small_tables) == "Frontend work"
    assert describe_role("unknown", small_tables) == GENERIC_ROLE_DESCRIPTION
    assert describe_industry("fintech", small_tables) == "Money"
    assert describe_industry("unknown", small_tables) == GENERIC_INDUSTRY_DESCRIPTION
    # an empty description falls back too
    assert describe_industry("retail", small_tables) == GENERIC_INDUSTRY_DESCRIPTION


def test_key_areas_union_role_first(small_tables):
    assert key_areas("data-engineer", "fintech", small_tables) == ["SQL", "Security", "Compliance"]
    assert key_areas("unknown", "fintech", small_tables) == ["Security", "Compliance"]
    assert key_areas("unknown", "unknown", small_tables) == []


def test_seed_key_areas(seed_tables):
    assert key_areas("devops-engineer", "fintech", seed_tables) == [
        "Infrastructure", "CI/CD", "Monitoring", "Security",
        "Compliance", "Financial Literacy", "Risk Management",
    ]


def test_tables_are_frozen(small_tables):
    with pytest.raises(ValidationError):
        small_tables.roles["frontend-engineer"].description = "changed"


def test_recommend_bundles_lookups(small_catalog, small_tables):
    rec = recommend("frontend-engineer", "fintech", small_catalog, small_tables)
    assert rec.role_description == "Frontend work"
    assert rec.industry_description == "Money"
    assert rec.key_areas == ["React", "Testing", "Security", "Compliance"]
    assert _ids(rec.templates) == ["t1", "t2"]
    dumped = rec.model_dump(by_alias=True)
    assert "keyAreas" in dumped and "roleDescription" in dumped


def test_list_keys(seed_tables):
    keys = list_keys(seed_tables)
    assert keys["roles"][0] == "frontend-engineer"
    assert set(keys["industries"]) == {"fintech", "healthcare", "ecommerce"}
