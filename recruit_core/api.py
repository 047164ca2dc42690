"""
FastAPI application for the recruiting assessment core.

- Template recommendations for a role / industry pair
- Result filtering and lookups over the session result store
- Comprehensive reports built on demand from the candidate's results

Session data (catalog, recommendation tables, results, reports) is
loaded once at startup from the seed files.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from .catalog_build import load_template_catalog
from .config import (
    AssessmentResult,
    AssessmentTemplate,
    ComprehensiveReport,
    HealthResponse,
    RecommendationTables,
    RecommendRequest,
    ResultsFilter,
    TemplateRecommendation,
)
from .recommend import describe_industry, describe_role, list_keys, recommend as recommend_templates
from .results import ReportNotFoundError
from .seed import load_recommendation_tables, load_reports, load_results
from .store import ReportBook, ResultStore


@dataclass
class AppState:
    catalog: Dict[str, AssessmentTemplate]
    tables: RecommendationTables
    store: ResultStore
    reports: ReportBook


def load_state() -> AppState:
    results = load_results()
    return AppState(
        catalog=load_template_catalog(),
        tables=load_recommendation_tables(),
        store=ResultStore(results),
        reports=ReportBook(load_reports(results)),
    )


# =============================================================================
# FastAPI app + startup
# =============================================================================

app = FastAPI(title="recruit-core")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_state: Optional[AppState] = None


@app.on_event("startup")
def startup_event() -> None:
    global _state
    logger.info("Loading session data...")
    _state = load_state()
    logger.info(
        "Session ready: {} templates, {} results, {} reports",
        len(_state.catalog),
        len(_state.store),
        len(_state.reports),
    )


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = load_state()
    return _state


class DescriptionResponse(BaseModel):
    key: str
    description: str


class NoteRequest(BaseModel):
    note: str = Field(..., min_length=1)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.get("/templates", response_model=List[AssessmentTemplate])
def templates() -> List[AssessmentTemplate]:
    return list(get_state().catalog.values())


@app.get("/recommendations/keys")
def recommendation_keys() -> Dict[str, List[str]]:
    return list_keys(get_state().tables)


@app.post("/recommend", response_model=TemplateRecommendation)
def recommend(req: RecommendRequest) -> TemplateRecommendation:
    state = get_state()
    return recommend_templates(req.role.strip(), req.industry.strip(), state.catalog, state.tables)


@app.get("/roles/{key}", response_model=DescriptionResponse)
def role_description(key: str) -> DescriptionResponse:
    return DescriptionResponse(key=key, description=describe_role(key, get_state().tables))


@app.get("/industries/{key}", response_model=DescriptionResponse)
def industry_description(key: str) -> DescriptionResponse:
    return DescriptionResponse(key=key, description=describe_industry(key, get_state().tables))


@app.post("/results/filter", response_model=List[AssessmentResult])
def filter_results(flt: ResultsFilter) -> List[AssessmentResult]:
    store = get_state().store
    store.set_filters(flt)
    return store.filtered_results


@app.get("/results/{result_id}", response_model=AssessmentResult)
def result_by_id(result_id: str) -> AssessmentResult:
    result = get_state().store.get_result_by_id(result_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Result {result_id} not found")
    return result


@app.get("/reports/by-id/{report_id}", response_model=ComprehensiveReport)
def report_by_id(report_id: str) -> ComprehensiveReport:
    report = get_state().reports.get_report_by_id(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail=f"Report {report_id} not found")
    return report


@app.get("/reports/{candidate_id}", response_model=ComprehensiveReport)
def candidate_report(
    candidate_id: str,
    campaign_id: str = Query(..., alias="campaignId", min_length=1),
) -> ComprehensiveReport:
    """Build a fresh report; scores come from the candidate's stored report if any."""
    state = get_state()
    existing = state.reports.get_report_by_candidate(candidate_id)
    try:
        return state.store.build_report(
            candidate_id,
            campaign_id,
            summary=existing,
            report_id=existing.id if existing is not None else None,
        )
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/reports/by-id/{report_id}/notes", response_model=ComprehensiveReport)
def add_report_note(report_id: str, req: NoteRequest) -> ComprehensiveReport:
    try:
        return get_state().reports.add_note(report_id, req.note)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
