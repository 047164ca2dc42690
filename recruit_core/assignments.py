"""
Assessment assignment tracking.

Assignments use the four-value status (pending, in_progress,
completed, expired).  Allowed moves are listed in
``ASSIGNMENT_TRANSITIONS``: pending -> in_progress -> completed, with
expired reachable from pending or in_progress.  Completed and expired
are terminal.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from loguru import logger

from .config import (
    ASSIGNMENT_ID_PREFIX,
    ASSIGNMENT_ID_WIDTH,
    ASSIGNMENT_TRANSITIONS,
    AssignedAssessment,
)
from .results import utc_now_iso
from .store import Clock


class AssignmentNotFoundError(LookupError):
    pass


class InvalidTransitionError(ValueError):
    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move assignment from {current!r} to {target!r}")


def can_transition(current: str, target: str) -> bool:
    return target in ASSIGNMENT_TRANSITIONS.get(current, ())


class AssignmentTracker:
    def __init__(
        self,
        assignments: Iterable[AssignedAssessment] = (),
        clock: Clock = utc_now_iso,
    ) -> None:
        self._assignments: Dict[str, AssignedAssessment] = {a.id: a for a in assignments}
        self._clock = clock

    @property
    def assignments(self) -> List[AssignedAssessment]:
        return list(self._assignments.values())

    def get(self, assignment_id: str) -> Optional[AssignedAssessment]:
        return self._assignments.get(assignment_id)

    def for_candidate(self, candidate_id: str) -> List[AssignedAssessment]:
        return [a for a in self._assignments.values() if a.candidate_id == candidate_id]

    def _next_id(self) -> str:
        n = len(self._assignments) + 1
        while f"{ASSIGNMENT_ID_PREFIX}{n:0{ASSIGNMENT_ID_WIDTH}d}" in self._assignments:
            n += 1
        return f"{ASSIGNMENT_ID_PREFIX}{n:0{ASSIGNMENT_ID_WIDTH}d}"

    def assign(
        self,
        assessment_id: str,
        candidate_id: str,
        candidate_name: str,
        due_date: str,
    ) -> AssignedAssessment:
        assignment = AssignedAssessment(
            id=self._next_id(),
            assessment_id=assessment_id,
            candidate_id=candidate_id,
            candidate_name=candidate_name,
            status="pending",
            assigned_at=self._clock(),
            due_date=due_date,
        )
        self._assignments[assignment.id] = assignment
        logger.info(
            "Assigned {} to candidate {} as {}", assessment_id, candidate_id, assignment.id
        )
        return assignment

    def transition(self, assignment_id: str, status: str) -> AssignedAssessment:
        """Move an assignment to ``status``; stamps ``completed_at`` on completion."""
        current = self._assignments.get(assignment_id)
        if current is None:
            raise AssignmentNotFoundError(assignment_id)
        if not can_transition(current.status, status):
            raise InvalidTransitionError(current.status, status)
        update = {"status": status}
        if status == "completed":
            update["completed_at"] = self._clock()
        updated = current.model_copy(update=update)
        self._assignments[assignment_id] = updated
        logger.info("Assignment {} moved {} -> {}", assignment_id, current.status, status)
        return updated

    def remove(self, assignment_id: str) -> None:
        if self._assignments.pop(assignment_id, None) is None:
            raise AssignmentNotFoundError(assignment_id)
