"""Core result data structures for the checker."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

from .severity import Severity


class ResultKind(str, Enum):
    """Possible results of running one rule against one project."""

    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    ENGINE_ERROR = "engine_error"

    @property
    def is_failure(self) -> bool:
        return self in (ResultKind.FAIL, ResultKind.ENGINE_ERROR)


RESULT_ORDER: Sequence[ResultKind] = (
    ResultKind.PASS,
    ResultKind.FAIL,
    ResultKind.SKIP,
    ResultKind.ENGINE_ERROR,
)


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"


@dataclass(frozen=True)
class Outcome:
    """Capture a single rule evaluation result."""

    rule_id: str
    kind: ResultKind
    severity: Severity
    diagnostic: str = ""
    brief: str = ""

    def __post_init__(self) -> None:
        if self.kind is ResultKind.SKIP and not self.diagnostic:
            raise ValueError(f"Skip outcome for rule {self.rule_id} requires a reason")
        if self.kind.is_failure and not self.diagnostic:
            raise ValueError(f"{self.kind.value} outcome for rule {self.rule_id} requires a diagnostic")

    def blocks(self, threshold: Severity) -> bool:
        """Return True when this outcome makes its project fail."""

        return self.kind.is_failure and self.severity.at_least(threshold)

    def to_dict(self) -> Dict[str, str]:
        return {
            "rule_id": self.rule_id,
            "brief": self.brief,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "diagnostic": self.diagnostic,
        }


@dataclass(frozen=True)
class Summary:
    """Aggregate outcome counts by result kind."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    engine_error: int = 0

    def count(self, kind: ResultKind) -> int:
        return getattr(self, _SUMMARY_ATTRS[kind])

    def to_dict(self) -> Dict[str, int]:
        return {kind.value: self.count(kind) for kind in RESULT_ORDER}

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return kind/count pairs ordered for reporting."""

        return [(kind.value, self.count(kind)) for kind in RESULT_ORDER]

    @property
    def total(self) -> int:
        return sum(self.count(kind) for kind in RESULT_ORDER)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[Outcome]) -> "Summary":
        counts = Counter(outcome.kind for outcome in outcomes)
        return cls(**{_SUMMARY_ATTRS[kind]: counts[kind] for kind in RESULT_ORDER})


_SUMMARY_ATTRS = {
    ResultKind.PASS: "passed",
    ResultKind.FAIL: "failed",
    ResultKind.SKIP: "skipped",
    ResultKind.ENGINE_ERROR: "engine_error",
}


@dataclass(frozen=True)
class ProjectReport:
    """Ordered outcomes and verdict for one project."""

    project: str
    project_type: str
    outcomes: Tuple[Outcome, ...]
    verdict: Verdict

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASS

    def outcome(self, rule_id: str) -> Outcome:
        for outcome in self.outcomes:
            if outcome.rule_id == rule_id:
                return outcome
        raise KeyError(rule_id)

    def to_dict(self) -> Dict[str, object]:
        return {
            "project": self.project,
            "project_type": self.project_type,
            "verdict": self.verdict.value,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


@dataclass(frozen=True)
class OverallReport:
    """Bundle every project report with the overall verdict and counts."""

    projects: Tuple[ProjectReport, ...]
    verdict: Verdict
    summary: Summary = field(default_factory=Summary)
    blocking_threshold: Severity = Severity.ERROR
    complete: bool = True

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASS

    def project(self, identifier: str) -> ProjectReport:
        for report in self.projects:
            if report.project == identifier:
                return report
        raise KeyError(identifier)

    def to_dict(self) -> Dict[str, object]:
        return {
            "projects": [report.to_dict() for report in self.projects],
            "verdict": self.verdict.value,
            "passed": self.passed,
            "complete": self.complete,
            "blocking_threshold": self.blocking_threshold.value,
            "summary": self.summary.to_dict(),
        }

    def exit_code(self) -> int:
        return 0 if self.passed and self.complete else 1
