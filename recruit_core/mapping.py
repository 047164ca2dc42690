"""
Mapping utilities between raw records and the pydantic schemas.

Rows arrive from pandas DataFrames (catalog files, exported result
sheets) or from plain dicts (seed JSON, HTTP bodies).  Both go through
:func:`canonicalise_keys` first so the legacy camelCase and spaced
column names collapse onto one snake_case spelling, then into the
strict models defined in :mod:`recruit_core.config`.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import pandas as pd
from loguru import logger

from .config import AssessmentResult, AssessmentTemplate, AssignedAssessment
from .normalize import dedup_preserve_order, to_snake_case

# Older exports use these names for the same concepts
LEGACY_KEY_ALIASES: Dict[str, str] = {
    "category": "type",
    "name": "title",
    "duration_minutes": "duration",
    "duration_mins": "duration",
    "assessment": "assessment_id",
    "candidate": "candidate_id",
    "improvement_areas": "areas_for_improvement",
    "improvements": "areas_for_improvement",
    "submitted": "submitted_at",
    "submission_date": "submitted_at",
    "evaluated": "evaluated_at",
    "completed": "completed_at",
    "due": "due_date",
}


def canonicalise_keys(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``record`` with snake_case, de-aliased keys.

    When two spellings of the same field are present the first one wins.
    """
    out: Dict[str, Any] = {}
    for key, value in record.items():
        canon = to_snake_case(key)
        canon = LEGACY_KEY_ALIASES.get(canon, canon)
        if canon not in out:
            out[canon] = value
    return out


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if value is pd.NaT:
        return True
    return isinstance(value, str) and not value.strip()


def _optional_str(value: Any) -> Optional[str]:
    return None if _is_missing(value) else str(value).strip()


def normalize_list_field(raw: Any) -> List[str]:
    """Robustly convert arbitrary list-ish values into a list of strings.

    Handles sequences, numpy arrays, stringified lists (e.g. "['A' 'B']"),
    and semicolon/pipe separated strings.  Duplicates are removed while
    preserving order.
    """
    labels: List[str]
    if isinstance(raw, (list, tuple, set)):
        labels = [str(x).strip() for x in raw if str(x).strip()]
    elif isinstance(raw, np.ndarray):
        labels = [str(x).strip() for x in raw.tolist() if str(x).strip()]
    elif _is_missing(raw):
        labels = []
    elif isinstance(raw, str):
        s = raw.strip()
        matches = re.findall(r"'([^']+)'|\"([^\"]+)\"", s)
        if matches:
            labels = [(a or b).strip() for a, b in matches if (a or b).strip()]
        else:
            # Commas are common inside sentences, so only split on ; and |
            parts = re.split(r"[;|\n]+", s)
            labels = [p.strip() for p in parts if p.strip()]
    else:
        s = str(raw).strip()
        labels = [s] if s else []
    return dedup_preserve_order(labels)


def to_template(row: Mapping[str, Any] | pd.Series) -> AssessmentTemplate:
    """Convert one catalog row into an :class:`AssessmentTemplate`.

    If any required field cannot be coerced into the expected type an
    exception is raised and logged.
    """
    data = canonicalise_keys(dict(row))
    try:
        return AssessmentTemplate(
            id=str(data.get("id", "")).strip(),
            type=str(data.get("type", "")).strip().lower(),
            subtype=_optional_str(data.get("subtype")),
            title=str(data.get("title", "") or "").strip(),
            description=str(data.get("description", "") or ""),
            instructions=str(data.get("instructions", "") or ""),
            duration=int(data.get("duration", 0) or 0),
            difficulty=str(data.get("difficulty", "medium") or "medium").strip().lower(),
            created_at=_optional_str(data.get("created_at")),
            updated_at=_optional_str(data.get("updated_at")),
        )
    except Exception as e:
        logger.exception("Error mapping row to assessment template: {}", e)
        raise


def to_result(row: Mapping[str, Any] | pd.Series) -> AssessmentResult:
    """Convert one exported row or dict into an :class:`AssessmentResult`."""
    data = canonicalise_keys(dict(row))
    try:
        return AssessmentResult(
            id=str(data["id"]).strip(),
            assessment_id=str(data["assessment_id"]).strip(),
            candidate_id=str(data["candidate_id"]).strip(),
            score=float(data.get("score", 0) or 0),
            completion_time=_optional_str(data.get("completion_time")) or "",
            feedback=_optional_str(data.get("feedback")) or "",
            strengths=normalize_list_field(data.get("strengths")),
            areas_for_improvement=normalize_list_field(data.get("areas_for_improvement")),
            status=str(data.get("status", "")).strip(),
            submitted_at=str(data["submitted_at"]).strip(),
            evaluated_at=_optional_str(data.get("evaluated_at")),
        )
    except Exception as e:
        logger.exception("Error mapping row to assessment result: {}", e)
        raise


def to_assignment(row: Mapping[str, Any]) -> AssignedAssessment:
    data = canonicalise_keys(dict(row))
    return AssignedAssessment(
        id=str(data["id"]),
        assessment_id=str(data["assessment_id"]),
        candidate_id=str(data["candidate_id"]),
        candidate_name=str(data.get("candidate_name", "")),
        status=str(data.get("status", "pending")),
        assigned_at=str(data["assigned_at"]),
        completed_at=_optional_str(data.get("completed_at")),
        due_date=str(data["due_date"]),
    )


def results_from_frame(df: pd.DataFrame) -> List[AssessmentResult]:
    """Map every row of a results sheet, keeping row order."""
    results = [to_result(row) for _, row in df.iterrows()]
    logger.info("Mapped {} result rows", len(results))
    return results
