"""Exception taxonomy for the project checker."""

from __future__ import annotations


class CheckerError(Exception):
    """Base class for all checker errors."""


class DuplicateRuleIDError(CheckerError):
    """A rule identifier was registered twice."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Duplicate rule ID: {rule_id}")
        self.rule_id = rule_id


class RegistryFrozenError(CheckerError):
    """The rule registry no longer accepts registrations."""


class ReportAlreadyFinalizedError(CheckerError):
    """An outcome was recorded after the report was finalized."""


class DuplicateOutcomeError(CheckerError):
    """A rule produced a second outcome for the same project."""

    def __init__(self, project_id: str, rule_id: str) -> None:
        super().__init__(f"Outcome for rule {rule_id} already recorded for project {project_id}")
        self.project_id = project_id
        self.rule_id = rule_id


class DiscoveryError(CheckerError):
    """Projects could not be enumerated from the requested paths."""


class ConfigError(CheckerError):
    """Configuration file or command-line values are invalid."""


class ProjectPathError(CheckerError):
    """A rule tried to access a path outside its project root."""
