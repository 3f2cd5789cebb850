"""Collect rule outcomes and fold them into the final report."""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from .errors import DuplicateOutcomeError, ReportAlreadyFinalizedError
from .project import ProjectContext
from .result import Outcome, OverallReport, ProjectReport, Summary, Verdict
from .severity import Severity

logger = logging.getLogger(__name__)


def project_verdict(outcomes: List[Outcome], threshold: Severity) -> Verdict:
    if any(outcome.blocks(threshold) for outcome in outcomes):
        return Verdict.FAIL
    return Verdict.PASS


class ResultAggregator:
    """Thread-safe, append-only collector of outcomes.

    ``record`` may be called from any number of worker threads. ``finalize``
    is called once; afterwards the aggregator rejects further outcomes.
    """

    def __init__(self, blocking_threshold: Severity = Severity.ERROR) -> None:
        self._threshold = blocking_threshold
        self._lock = threading.Lock()
        self._outcomes: Dict[str, Dict[str, Outcome]] = {}
        self._project_types: Dict[str, str] = {}
        self._incomplete_reason: Optional[str] = None
        self._report: Optional[OverallReport] = None

    @property
    def blocking_threshold(self) -> Severity:
        return self._threshold

    @property
    def finalized(self) -> bool:
        return self._report is not None

    def begin_project(self, context: ProjectContext) -> None:
        """Make sure ``context`` shows up in the report even without outcomes."""

        with self._lock:
            self._ensure_open()
            self._outcomes.setdefault(context.identifier, {})
            self._project_types[context.identifier] = context.project_type.value

    def record(self, project_id: str, outcome: Outcome) -> None:
        with self._lock:
            self._ensure_open()
            recorded = self._outcomes.setdefault(project_id, {})
            if outcome.rule_id in recorded:
                raise DuplicateOutcomeError(project_id, outcome.rule_id)
            recorded[outcome.rule_id] = outcome

    def mark_incomplete(self, reason: str) -> None:
        with self._lock:
            self._ensure_open()
            if self._incomplete_reason is None:
                logger.info("Report marked incomplete: %s", reason)
                self._incomplete_reason = reason

    @property
    def incomplete_reason(self) -> Optional[str]:
        return self._incomplete_reason

    def finalize(self) -> OverallReport:
        """Sort, compute verdicts and freeze the collected outcomes."""

        with self._lock:
            self._ensure_open()
            projects = []
            for project_id in sorted(self._outcomes):
                recorded = self._outcomes[project_id]
                outcomes = [recorded[rule_id] for rule_id in sorted(recorded)]
                projects.append(
                    ProjectReport(
                        project=project_id,
                        project_type=self._project_types.get(project_id, ""),
                        outcomes=tuple(outcomes),
                        verdict=project_verdict(outcomes, self._threshold),
                    )
                )

            complete = self._incomplete_reason is None
            failed = any(report.verdict is Verdict.FAIL for report in projects)
            self._report = OverallReport(
                projects=tuple(projects),
                verdict=Verdict.FAIL if failed else Verdict.PASS,
                summary=Summary.from_outcomes(
                    outcome for report in projects for outcome in report.outcomes
                ),
                blocking_threshold=self._threshold,
                complete=complete,
            )
            return self._report

    def _ensure_open(self) -> None:
        if self._report is not None:
            raise ReportAlreadyFinalizedError("Report has already been finalized")
