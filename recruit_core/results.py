"""
Filtering and per-candidate aggregation of assessment results.

``filter_results`` narrows a result collection with a conjunctive
:class:`ResultsFilter`; ``build_report`` assembles a
:class:`ComprehensiveReport` for one candidate.  Report scores are
supplied by the caller through a :class:`ReportSummary`; what this
module owns is the link between a report and its results: the
report's ``assessment_results`` is always exactly the candidate's
results, and ``updated_at`` tracks the most recent of them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pandas as pd
from loguru import logger

from .config import (
    AssessmentResult,
    ComprehensiveReport,
    ReportSummary,
    ResultsFilter,
)


class ReportNotFoundError(LookupError):
    """No report can be produced or found for the requested key."""

    def __init__(self, key: str, message: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message or f"No assessment results for candidate {key!r}")


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_instant(value: Optional[str]) -> pd.Timestamp:
    """Parse a timestamp string as a UTC instant.

    Naive strings are read as UTC.  Anything unparseable becomes ``NaT``,
    which compares false against every instant.
    """
    if value is None:
        return pd.NaT
    return pd.to_datetime(value, utc=True, errors="coerce")


def coerce_filter(flt: ResultsFilter | Mapping[str, Any] | None) -> ResultsFilter:
    if flt is None:
        return ResultsFilter()
    if isinstance(flt, ResultsFilter):
        return flt
    return ResultsFilter.model_validate(flt)


def filter_results(
    results: Sequence[AssessmentResult],
    flt: ResultsFilter | Mapping[str, Any] | None = None,
) -> List[AssessmentResult]:
    """Return the results matching every field set on ``flt``, in input order.

    - ``candidate_id``: exact match
    - ``assessment_type``: prefix of ``assessment_id``
    - ``status``: exact match
    - ``date_range``: ``start <= submitted_at <= end``

    Empty strings count as unset.  ``campaign_id`` is accepted but not
    applied, as results do not carry a campaign.
    """
    flt = coerce_filter(flt)

    start = end = None
    if flt.date_range is not None:
        start = to_instant(flt.date_range.start)
        end = to_instant(flt.date_range.end)

    matched: List[AssessmentResult] = []
    for result in results:
        if flt.candidate_id and result.candidate_id != flt.candidate_id:
            continue
        if flt.assessment_type and not result.assessment_id.startswith(flt.assessment_type):
            continue
        if flt.status and result.status != flt.status:
            continue
        if flt.date_range is not None:
            submitted = to_instant(result.submitted_at)
            # NaT on either side compares false, so it never excludes
            if submitted < start or submitted > end:
                continue
        matched.append(result)

    logger.debug("Filter kept {} of {} results", len(matched), len(results))
    return matched


def results_for_candidate(results: Iterable[AssessmentResult], candidate_id: str) -> List[AssessmentResult]:
    return [r for r in results if r.candidate_id == candidate_id]


def _pick_extreme(stamps: Sequence[str], latest: bool) -> str:
    best = stamps[0]
    best_instant = to_instant(best)
    for stamp in stamps[1:]:
        instant = to_instant(stamp)
        if pd.isna(instant):
            continue
        if pd.isna(best_instant) or (instant > best_instant if latest else instant < best_instant):
            best, best_instant = stamp, instant
    return best


def latest_activity(results: Sequence[AssessmentResult]) -> str:
    """Latest ``evaluated_at`` (or ``submitted_at`` when unevaluated)."""
    return _pick_extreme([r.evaluated_at or r.submitted_at for r in results], latest=True)


def earliest_submission(results: Sequence[AssessmentResult]) -> str:
    return _pick_extreme([r.submitted_at for r in results], latest=False)


def build_report(
    candidate_id: str,
    results: Sequence[AssessmentResult],
    campaign_id: str,
    summary: Optional[ReportSummary] = None,
    *,
    report_id: Optional[str] = None,
) -> ComprehensiveReport:
    """Aggregate a candidate's results into a comprehensive report.

    Raises :class:`ReportNotFoundError` when the candidate has no
    results; a report is never synthesised from nothing.
    """
    own = results_for_candidate(results, candidate_id)
    if not own:
        raise ReportNotFoundError(candidate_id)

    summary = summary or ReportSummary()
    report = ComprehensiveReport(
        id=report_id or f"cr-{campaign_id}-{candidate_id}",
        candidate_id=candidate_id,
        campaign_id=campaign_id,
        assessment_results=own,
        created_at=earliest_submission(own),
        updated_at=latest_activity(own),
        **summary.model_dump(include=set(ReportSummary.model_fields)),
    )
    logger.info(
        "Built report {} for candidate {} from {} results", report.id, candidate_id, len(own)
    )
    return report


def refresh_report(report: ComprehensiveReport, results: Sequence[AssessmentResult]) -> ComprehensiveReport:
    """Re-derive a report's results and ``updated_at`` from the result store.

    Everything else on the report is kept.  Raises
    :class:`ReportNotFoundError` if the candidate no longer has results.
    """
    own = results_for_candidate(results, report.candidate_id)
    if not own:
        raise ReportNotFoundError(report.candidate_id)
    return report.model_copy(
        update={"assessment_results": own, "updated_at": latest_activity(own)}
    )


RESULT_COLUMNS = [
    "id",
    "assessment_id",
    "candidate_id",
    "score",
    "completion_time",
    "status",
    "submitted_at",
    "evaluated_at",
    "strengths",
    "areas_for_improvement",
    "feedback",
]


def results_frame(results: Sequence[AssessmentResult]) -> pd.DataFrame:
    """Tabular view of results, one row per result, input order kept."""
    return pd.DataFrame([r.model_dump() for r in results], columns=RESULT_COLUMNS)
