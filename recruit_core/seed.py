"""
Loaders for the bundled seed data.

The seed files under ``recruit_core/data`` stand in for the platform's
template catalog, recommendation tables and result store during a
session.  Each loader takes an explicit path so tests and deployments
can point at their own copies (or set ``RECRUIT_DATA_DIR``).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from loguru import logger

from .config import (
    ASSIGNMENTS_PATH,
    RECOMMENDATIONS_PATH,
    REPORTS_PATH,
    RESULTS_PATH,
    AssessmentResult,
    AssignedAssessment,
    ComprehensiveReport,
    RecommendationTables,
    ReportSummary,
)
from .mapping import canonicalise_keys, to_assignment, to_result
from .results import build_report


def _read_json(path: Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as fp:
        return json.load(fp)


def load_recommendation_tables(path: Path = RECOMMENDATIONS_PATH) -> RecommendationTables:
    """Load the role and industry recommendation tables (frozen)."""
    tables = RecommendationTables.model_validate(_read_json(path))
    logger.info(
        "Loaded recommendation tables: {} roles, {} industries",
        len(tables.roles),
        len(tables.industries),
    )
    return tables


def load_results(path: Path = RESULTS_PATH) -> List[AssessmentResult]:
    results = [to_result(row) for row in _read_json(path)]
    logger.info("Loaded {} assessment results from {}", len(results), path)
    return results


def load_assignments(path: Path = ASSIGNMENTS_PATH) -> List[AssignedAssessment]:
    assignments = [to_assignment(row) for row in _read_json(path)]
    logger.info("Loaded {} assigned assessments from {}", len(assignments), path)
    return assignments


def load_reports(
    results: Sequence[AssessmentResult],
    path: Path = REPORTS_PATH,
) -> List[ComprehensiveReport]:
    """Build the seeded reports against ``results``.

    The seed file only carries the caller-supplied part of each report
    (scores, strengths, risks, tier, notes); results and timestamps are
    derived from ``results``.  Entries whose candidate has no results
    are skipped with a warning.
    """
    reports: List[ComprehensiveReport] = []
    for raw in _read_json(path):
        data: Dict[str, Any] = canonicalise_keys(raw)
        summary = ReportSummary.model_validate(data)
        try:
            report = build_report(
                data["candidate_id"],
                results,
                data["campaign_id"],
                summary,
                report_id=data.get("id"),
            )
        except LookupError as e:
            logger.warning("Skipping seeded report {}: {}", data.get("id"), e)
            continue
        reports.append(report)
    logger.info("Loaded {} comprehensive reports from {}", len(reports), path)
    return reports
