from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError

from recruit_core.mapping import (
    canonicalise_keys,
    normalize_list_field,
    results_from_frame,
    to_result,
    to_template,
)
from recruit_core.normalize import basic_clean, dedup_preserve_order, to_snake_case


@pytest.mark.parametrize(
    "key,expected",
    [
        ("matchScore", "match_score"),
        ("match_score", "match_score"),
        ("Match Score", "match_score"),
        ("match-score", "match_score"),
        ("areasForImprovement", "areas_for_improvement"),
        ("candidateID", "candidate_id"),
    ],
)
def test_to_snake_case(key, expected):
    assert to_snake_case(key) == expected


def test_canonicalise_keys_first_spelling_wins():
    out = canonicalise_keys({"matchScore": 1, "match_score": 2, "Candidate": "c1", "improvements": ["x"]})
    assert out == {"match_score": 1, "candidate_id": "c1", "areas_for_improvement": ["x"]}


@pytest.mark.parametrize(
    "raw,expected",
    [
        (["a", " b ", "a", ""], ["a", "b"]),
        (np.array(["x", "y"]), ["x", "y"]),
        ("['A' 'B']", ["A", "B"]),
        ("Clean code; Testing | Docs", ["Clean code", "Testing", "Docs"]),
        ("Good, but slow", ["Good, but slow"]),
        (None, []),
        (float("nan"), []),
        ("", []),
    ],
)
def test_normalize_list_field(raw, expected):
    assert normalize_list_field(raw) == expected


def test_to_result_accepts_legacy_names():
    result = to_result(
        {
            "id": "r1",
            "assessmentId": "a001",
            "Candidate ID": "c001",
            "score": "92",
            "status": "completed",
            "submission_date": "2024-03-15T10:30:00Z",
            "evaluatedAt": "",
            "strengths": "Clean code; Testing",
        }
    )
    assert result.candidate_id == "c001"
    assert result.score == 92.0
    assert result.submitted_at == "2024-03-15T10:30:00Z"
    assert result.evaluated_at is None
    assert result.strengths == ["Clean code", "Testing"]
    assert result.areas_for_improvement == []


def test_to_result_rejects_expired_status():
    with pytest.raises(ValidationError):
        to_result({"id": "r1", "assessmentId": "a1", "candidateId": "c1", "status": "expired", "submittedAt": "2024-01-01"})


def test_to_template_from_series():
    row = pd.Series({"id": "t1", "type": "Cultural", "name": "Values", "duration": np.int64(30), "subtype": np.nan})
    template = to_template(row)
    assert template.type == "cultural"
    assert template.title == "Values"
    assert template.duration == 30
    assert template.subtype is None


def test_results_from_frame_keeps_order():
    df = pd.DataFrame(
        [
            {"id": "r2", "assessment_id": "a2", "candidate_id": "c1", "status": "pending", "submitted_at": "2024-02-01"},
            {"id": "r1", "assessment_id": "a1", "candidate_id": "c1", "status": "completed", "submitted_at": "2024-01-01"},
        ]
    )
    assert [r.id for r in results_from_frame(df)] == ["r2", "r1"]


def test_text_helpers():
    assert basic_clean("  <b>Hello</b>\n  world ") == "Hello world"
    assert basic_clean(None) == ""
    assert dedup_preserve_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
