from __future__ import annotations

import json

import pandas as pd

from recruit_core.cli import main


def test_recommend_table(capsys):
    assert main(["--log-dir", "", "recommend", "--role", "frontend-engineer", "--industry", "fintech"]) == 0
    out = capsys.readouterr().out
    assert "Key areas: React, TypeScript" in out
    assert "11 templates" in out


def test_recommend_json(capsys):
    assert main(["--log-dir", "", "recommend", "--role", "nobody", "--json"]) == 0
    body = json.loads(capsys.readouterr().out)
    assert len(body["templates"]) == 24


def test_filter_writes_csv(tmp_path, capsys):
    out = tmp_path / "out" / "results.csv"
    assert main(["--log-dir", "", "filter", "--candidate", "c001", "--out", str(out)]) == 0
    df = pd.read_csv(out)
    assert df["id"].tolist() == ["r001", "r002"]
    assert df.loc[0, "strengths"].startswith("Clean code structure; ")
    assert "Wrote 2 rows" in capsys.readouterr().out


def test_filter_needs_both_dates(capsys):
    assert main(["--log-dir", "", "filter", "--start", "2024-01-01"]) == 2


def test_report(capsys):
    assert main(["--log-dir", "", "report", "--candidate", "c002", "--campaign", "camp001"]) == 0
    body = json.loads(capsys.readouterr().out)
    assert body["id"] == "cr002"
    assert body["recommendation"] == "Recommended"
    assert [r["id"] for r in body["assessmentResults"]] == ["r003"]


def test_report_without_seeded_summary(capsys):
    assert main(["--log-dir", "", "report", "--candidate", "c001", "--campaign", "camp009", "--reports", ""]) == 0
    body = json.loads(capsys.readouterr().out)
    assert body["id"] == "cr-camp009-c001"
    assert body["overallScore"] == 0


def test_report_unknown_candidate(capsys):
    assert main(["--log-dir", "", "report", "--candidate", "c404", "--campaign", "camp001"]) == 1
    assert "c404" in capsys.readouterr().err
