"""Rule descriptors shared by the registry, executor and rule modules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, FrozenSet, Tuple

from checker.project import ProjectContext, ProjectType
from checker.result import ResultKind
from checker.severity import Severity

RuleReturn = Tuple[ResultKind, str]
RuleCheck = Callable[[ProjectContext], RuleReturn]

ALL_PROJECT_TYPES: FrozenSet[ProjectType] = frozenset(ProjectType)

VALID_BASE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*$")


@dataclass(frozen=True)
class RuleDescriptor:
    """Static metadata of one rule plus the callable that evaluates it."""

    rule_id: str
    brief: str
    category: str
    severity: Severity
    project_types: FrozenSet[ProjectType]
    check: RuleCheck

    def applies_to(self, project_type: ProjectType) -> bool:
        return project_type in self.project_types


def passed() -> RuleReturn:
    return ResultKind.PASS, ""


def failed(diagnostic: str) -> RuleReturn:
    return ResultKind.FAIL, diagnostic


def skipped(reason: str) -> RuleReturn:
    return ResultKind.SKIP, reason


def valid_base_name(name: str) -> bool:
    """Return True when ``name`` only uses characters allowed in project paths."""

    return bool(VALID_BASE_NAME_PATTERN.match(name))


__all__ = [
    "ALL_PROJECT_TYPES",
    "ProjectContext",
    "RuleCheck",
    "RuleDescriptor",
    "RuleReturn",
    "failed",
    "passed",
    "skipped",
    "valid_base_name",
]
