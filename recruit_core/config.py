"""
Configuration for the recruiting assessment core.

Paths, environment overrides, fallback strings and the pydantic schemas
shared by the resolver, the results aggregator and the HTTP/CLI layers.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Paths
PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent
SEED_DIR = Path(os.getenv("RECRUIT_DATA_DIR", str(PACKAGE_ROOT / "data")))
TEMPLATES_PATH = SEED_DIR / "templates.json"
RECOMMENDATIONS_PATH = SEED_DIR / "recommendations.json"
RESULTS_PATH = SEED_DIR / "results.json"
REPORTS_PATH = SEED_DIR / "reports.json"
ASSIGNMENTS_PATH = SEED_DIR / "assignments.json"

# Logging
LOG_DIR = Path(os.getenv("RECRUIT_LOG_DIR", str(PROJECT_ROOT / "logs")))
LOG_LEVEL = os.getenv("RECRUIT_LOG_LEVEL", "INFO")
LOG_ROTATION = "10 MB"

# Fallbacks for unknown role / industry keys
GENERIC_ROLE_DESCRIPTION = "General assessment for the role"
GENERIC_INDUSTRY_DESCRIPTION = "General assessment for the industry"

# Category order used when flattening recommended template ids
TEMPLATE_CATEGORIES: Tuple[str, ...] = ("technical", "behavioral", "cultural")

# Id prefixes for records created during a session
REPORT_ID_PREFIX = "rep"
REPORT_ID_WIDTH = 3
ASSIGNMENT_ID_PREFIX = "aa"
ASSIGNMENT_ID_WIDTH = 6

DEFAULT_RECOMMENDATION = "Consider"

# Text processing
MAX_INPUT_CHARS = 20_000

# Enums
TemplateType = Literal["technical", "behavioral", "cultural", "skills"]
Difficulty = Literal["easy", "medium", "hard"]
# Results only ever carry these three; "expired" exists for assignments only.
ResultStatus = Literal["completed", "in_progress", "pending"]
AssignmentStatus = Literal["pending", "in_progress", "completed", "expired"]
RecommendationTier = Literal[
    "Highly Recommended", "Recommended", "Consider", "Not Recommended"
]

ASSIGNMENT_TRANSITIONS: Dict[str, Tuple[str, ...]] = {
    "pending": ("in_progress", "expired"),
    "in_progress": ("completed", "expired"),
    "completed": (),
    "expired": (),
}


# Pydantic schemas
class Schema(BaseModel):
    """Base model: snake_case in Python, camelCase accepted and emitted at the edge."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenSchema(Schema):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class TemplateIds(FrozenSchema):
    technical: Tuple[str, ...] = ()
    behavioral: Tuple[str, ...] = ()
    cultural: Tuple[str, ...] = ()

    def in_order(self) -> List[str]:
        """All ids in category order (technical, behavioral, cultural)."""
        ids: List[str] = []
        for category in TEMPLATE_CATEGORIES:
            ids.extend(getattr(self, category))
        return ids


class RoleRecommendation(FrozenSchema):
    role: str
    industry: str
    description: str
    key_skills: Tuple[str, ...] = ()
    recommended_templates: TemplateIds = TemplateIds()


class IndustryRecommendation(FrozenSchema):
    industry: str
    description: str
    key_focus: Tuple[str, ...] = ()
    recommended_templates: TemplateIds = TemplateIds()


class RecommendationTables(FrozenSchema):
    roles: Dict[str, RoleRecommendation] = Field(default_factory=dict)
    industries: Dict[str, IndustryRecommendation] = Field(default_factory=dict)


class AssessmentTemplate(Schema):
    id: str
    type: TemplateType
    subtype: Optional[str] = None
    title: str
    description: str = ""
    instructions: str = ""
    duration: int = Field(default=0, ge=0)
    difficulty: Difficulty = "medium"
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AssessmentResult(Schema):
    id: str
    assessment_id: str
    candidate_id: str
    score: float
    completion_time: str = ""
    feedback: str = ""
    strengths: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)
    status: ResultStatus
    submitted_at: str
    evaluated_at: Optional[str] = None


class ReportSummary(Schema):
    """Caller-supplied part of a comprehensive report; nothing here is computed."""

    overall_score: float = 0
    technical_score: float = 0
    culture_fit_score: float = 0
    problem_solving_score: float = 0
    strengths: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    recommendation: RecommendationTier = DEFAULT_RECOMMENDATION
    notes: List[str] = Field(default_factory=list)


class ComprehensiveReport(ReportSummary):
    id: str
    candidate_id: str
    campaign_id: str
    assessment_results: List[AssessmentResult] = Field(default_factory=list)
    created_at: str
    updated_at: str


class DateRange(Schema):
    start: str
    end: str


class ResultsFilter(Schema):
    campaign_id: Optional[str] = None
    candidate_id: Optional[str] = None
    assessment_type: Optional[str] = None
    status: Optional[ResultStatus] = None
    date_range: Optional[DateRange] = None


class AssignedAssessment(Schema):
    id: str
    assessment_id: str
    candidate_id: str
    candidate_name: str
    status: AssignmentStatus = "pending"
    assigned_at: str
    completed_at: Optional[str] = None
    due_date: str


class TemplateRecommendation(Schema):
    role: str
    industry: str
    role_description: str
    industry_description: str
    key_areas: List[str]
    templates: List[AssessmentTemplate]


class RecommendRequest(Schema):
    role: str = ""
    industry: str = ""


class HealthResponse(BaseModel):
    status: str
