"""Rules for libraries and for every project type."""

from __future__ import annotations

import re
from typing import Tuple

from checker.project import ProjectType
from checker.severity import Severity

from . import (
    ALL_PROJECT_TYPES,
    ProjectContext,
    RuleDescriptor,
    RuleReturn,
    failed,
    passed,
    skipped,
    valid_base_name,
)

PROPERTIES_FILENAME = "library.properties"
NO_METADATA = "No metadata file"
UNPARSEABLE_METADATA = "Metadata file could not be parsed"
RELAXED_SEMVER_PATTERN = re.compile(r"^\d+(\.\d+){0,2}([-+][0-9A-Za-z.-]+)*$")

LIBRARY_ONLY = frozenset({ProjectType.LIBRARY})


def properties_missing(context: ProjectContext) -> RuleReturn:
    if context.metadata.present:
        return passed()
    return failed(f"{PROPERTIES_FILENAME} not found in {context.name}")


def properties_format(context: ProjectContext) -> RuleReturn:
    metadata = context.metadata
    if not metadata.present:
        return skipped(NO_METADATA)
    if metadata.error:
        return failed(metadata.error)
    return passed()


def name_field(context: ProjectContext) -> RuleReturn:
    metadata = context.metadata
    if not metadata.present:
        return skipped(NO_METADATA)
    if not metadata.loaded:
        return skipped(UNPARSEABLE_METADATA)
    if not metadata.data.get("name", "").strip():
        return failed("name field missing or empty")
    return passed()


def version_field(context: ProjectContext) -> RuleReturn:
    metadata = context.metadata
    if not metadata.present:
        return skipped(NO_METADATA)
    if not metadata.loaded:
        return skipped(UNPARSEABLE_METADATA)
    version = metadata.data.get("version", "").strip()
    if not version:
        return failed("version field missing or empty")
    if not RELAXED_SEMVER_PATTERN.match(version):
        return failed(f"version {version!r} is not a valid version")
    return passed()


def prohibited_characters_in_folder_name(context: ProjectContext) -> RuleReturn:
    if valid_base_name(context.name):
        return passed()
    return failed(context.name)


RULES: Tuple[RuleDescriptor, ...] = (
    RuleDescriptor(
        rule_id="LP001",
        brief="library.properties missing",
        category="metadata",
        severity=Severity.WARNING,
        project_types=LIBRARY_ONLY,
        check=properties_missing,
    ),
    RuleDescriptor(
        rule_id="LP002",
        brief="library.properties format",
        category="metadata",
        severity=Severity.ERROR,
        project_types=LIBRARY_ONLY,
        check=properties_format,
    ),
    RuleDescriptor(
        rule_id="LP003",
        brief="library.properties name field",
        category="metadata",
        severity=Severity.ERROR,
        project_types=LIBRARY_ONLY,
        check=name_field,
    ),
    RuleDescriptor(
        rule_id="LP004",
        brief="library.properties version field",
        category="metadata",
        severity=Severity.ERROR,
        project_types=LIBRARY_ONLY,
        check=version_field,
    ),
    RuleDescriptor(
        rule_id="PR001",
        brief="prohibited characters in folder name",
        category="structure",
        severity=Severity.ERROR,
        project_types=ALL_PROJECT_TYPES,
        check=prohibited_characters_in_folder_name,
    ),
)
