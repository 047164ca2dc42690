from __future__ import annotations

import sys
from typing import Dict, List

import pytest
from loguru import logger

from recruit_core.catalog_build import load_template_catalog
from recruit_core.config import (
    AssessmentResult,
    AssessmentTemplate,
    RecommendationTables,
)
from recruit_core.seed import load_recommendation_tables, load_results


@pytest.fixture(autouse=True)
def reset_logging():
    # the CLI swaps sinks; rebind to whatever stderr is current
    yield
    logger.remove()
    logger.add(lambda msg: sys.stderr.write(msg), level="INFO")


def make_template(template_id: str, type_: str = "technical") -> AssessmentTemplate:
    return AssessmentTemplate(id=template_id, type=type_, title=f"Template {template_id}")


def make_result(
    result_id: str,
    candidate_id: str = "c001",
    *,
    assessment_id: str = "a001",
    status: str = "completed",
    submitted_at: str = "2024-01-01",
    evaluated_at: str | None = None,
    score: float = 80,
) -> AssessmentResult:
    return AssessmentResult(
        id=result_id,
        assessment_id=assessment_id,
        candidate_id=candidate_id,
        score=score,
        status=status,
        submitted_at=submitted_at,
        evaluated_at=evaluated_at,
    )


@pytest.fixture()
def small_catalog() -> Dict[str, AssessmentTemplate]:
    return {tid: make_template(tid) for tid in ("t1", "t2", "t3", "t4")}


@pytest.fixture()
def small_tables() -> RecommendationTables:
    return RecommendationTables.model_validate(
        {
            "roles": {
                "frontend-engineer": {
                    "role": "Frontend Engineer",
                    "industry": "Technology",
                    "description": "Frontend work",
                    "keySkills": ["React", "Testing"],
                    "recommendedTemplates": {"technical": ["t1"]},
                },
                "data-engineer": {
                    "role": "Data Engineer",
                    "industry": "Technology",
                    "description": "Pipelines",
                    "keySkills": ["SQL", "Security"],
                    "recommendedTemplates": {"technical": ["t1"], "behavioral": ["t2"]},
                },
            },
            "industries": {
                "fintech": {
                    "industry": "FinTech",
                    "description": "Money",
                    "keyFocus": ["Security", "Compliance"],
                    "recommendedTemplates": {"technical": ["t1", "t2"]},
                },
                "retail": {
                    "industry": "Retail",
                    "description": "",
                    "keyFocus": [],
                    "recommendedTemplates": {"cultural": ["t2", "t3", "t404"]},
                },
            },
        }
    )


@pytest.fixture(scope="session")
def seed_catalog() -> Dict[str, AssessmentTemplate]:
    return load_template_catalog()


@pytest.fixture(scope="session")
def seed_tables() -> RecommendationTables:
    return load_recommendation_tables()


@pytest.fixture()
def seed_results() -> List[AssessmentResult]:
    return load_results()


@pytest.fixture()
def two_results() -> List[AssessmentResult]:
    return [
        make_result("r1", "c1", status="completed", submitted_at="2024-01-01"),
        make_result("r2", "c1", status="pending", submitted_at="2024-02-01"),
    ]
