"""
In-memory session state for results and reports.

``ResultStore`` is the authoritative, ordered result collection plus
the current filter selection.  ``ReportBook`` keeps comprehensive
reports for the session.  A report's results are never edited by
hand: they are re-derived from a ``ResultStore`` through
:func:`recruit_core.results.refresh_report`.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from loguru import logger

from .config import (
    REPORT_ID_PREFIX,
    REPORT_ID_WIDTH,
    AssessmentResult,
    ComprehensiveReport,
    ReportSummary,
    ResultsFilter,
)
from .mapping import canonicalise_keys
from .results import (
    ReportNotFoundError,
    coerce_filter,
    build_report,
    filter_results,
    refresh_report,
    utc_now_iso,
)

Clock = Callable[[], str]

# Fields derived from the result store or fixed at creation
READ_ONLY_REPORT_FIELDS = frozenset(
    {"id", "candidate_id", "assessment_results", "created_at", "updated_at"}
)


class ResultStore:
    def __init__(self, results: Iterable[AssessmentResult] = ()) -> None:
        self._results: List[AssessmentResult] = list(results)
        self._filters = ResultsFilter()

    @property
    def results(self) -> List[AssessmentResult]:
        return list(self._results)

    @property
    def filters(self) -> ResultsFilter:
        return self._filters

    def set_filters(self, flt: ResultsFilter | Mapping[str, Any] | None) -> None:
        self._filters = coerce_filter(flt)
        logger.debug("Result filters set to {}", self._filters.model_dump(exclude_none=True))

    @property
    def filtered_results(self) -> List[AssessmentResult]:
        return filter_results(self._results, self._filters)

    def get_result_by_id(self, result_id: str) -> Optional[AssessmentResult]:
        return next((r for r in self._results if r.id == result_id), None)

    def append(self, result: AssessmentResult) -> None:
        if self.get_result_by_id(result.id) is not None:
            raise ValueError(f"Result {result.id!r} already exists")
        self._results.append(result)
        logger.info("Appended result {} for candidate {}", result.id, result.candidate_id)

    def remove(self, result_id: str) -> bool:
        """Remove a result by id; returns False if it was not present."""
        before = len(self._results)
        self._results = [r for r in self._results if r.id != result_id]
        removed = len(self._results) < before
        if removed:
            logger.info("Removed result {}", result_id)
        return removed

    def build_report(
        self,
        candidate_id: str,
        campaign_id: str,
        summary: Optional[ReportSummary] = None,
        *,
        report_id: Optional[str] = None,
    ) -> ComprehensiveReport:
        return build_report(candidate_id, self._results, campaign_id, summary, report_id=report_id)

    def __len__(self) -> int:
        return len(self._results)


class ReportBook:
    """Comprehensive reports for the session, in insertion order."""

    def __init__(
        self,
        reports: Iterable[ComprehensiveReport] = (),
        clock: Clock = utc_now_iso,
    ) -> None:
        self._reports: List[ComprehensiveReport] = list(reports)
        self._clock = clock

    @property
    def reports(self) -> List[ComprehensiveReport]:
        return list(self._reports)

    def get_report_by_id(self, report_id: str) -> Optional[ComprehensiveReport]:
        return next((r for r in self._reports if r.id == report_id), None)

    def get_report_by_candidate(self, candidate_id: str) -> Optional[ComprehensiveReport]:
        return next((r for r in self._reports if r.candidate_id == candidate_id), None)

    def _require(self, report_id: str) -> int:
        for idx, report in enumerate(self._reports):
            if report.id == report_id:
                return idx
        raise ReportNotFoundError(report_id, f"No report with id {report_id!r}")

    def _next_id(self) -> str:
        taken = {r.id for r in self._reports}
        n = len(self._reports) + 1
        while f"{REPORT_ID_PREFIX}{n:0{REPORT_ID_WIDTH}d}" in taken:
            n += 1
        return f"{REPORT_ID_PREFIX}{n:0{REPORT_ID_WIDTH}d}"

    def add_report(
        self,
        candidate_id: str,
        campaign_id: str,
        store: ResultStore,
        summary: Optional[ReportSummary] = None,
    ) -> ComprehensiveReport:
        """Build a report from ``store`` under a fresh ``repNNN`` id."""
        report = store.build_report(candidate_id, campaign_id, summary, report_id=self._next_id())
        self._reports.append(report)
        return report

    def update_report(self, report_id: str, updates: Mapping[str, Any]) -> ComprehensiveReport:
        """Apply caller-supplied field updates and stamp ``updated_at``.

        Derived fields (id, candidate, results, timestamps) cannot be
        updated this way.
        """
        updates = canonicalise_keys(updates)
        blocked = sorted(set(updates) & READ_ONLY_REPORT_FIELDS)
        if blocked:
            raise ValueError(f"Cannot update derived report fields: {blocked}")
        idx = self._require(report_id)
        merged: Dict[str, Any] = self._reports[idx].model_dump()
        merged.update(updates)
        merged["updated_at"] = self._clock()
        report = ComprehensiveReport.model_validate(merged)
        self._reports[idx] = report
        logger.info("Updated report {} fields {}", report_id, sorted(updates))
        return report

    def add_note(self, report_id: str, note: str) -> ComprehensiveReport:
        idx = self._require(report_id)
        current = self._reports[idx]
        report = current.model_copy(
            update={"notes": [*current.notes, note], "updated_at": self._clock()}
        )
        self._reports[idx] = report
        return report

    def delete_report(self, report_id: str) -> None:
        idx = self._require(report_id)
        del self._reports[idx]
        logger.info("Deleted report {}", report_id)

    def regenerate(self, report_id: str, store: ResultStore) -> ComprehensiveReport:
        """Re-derive a report's results from ``store``."""
        idx = self._require(report_id)
        report = refresh_report(self._reports[idx], store.results)
        self._reports[idx] = report
        return report

    def __len__(self) -> int:
        return len(self._reports)
