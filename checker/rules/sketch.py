"""Rules checking the layout and metadata of sketches."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from checker.project import ProjectType
from checker.severity import Severity

from . import ProjectContext, RuleDescriptor, RuleReturn, failed, passed, skipped, valid_base_name

MAIN_FILE_EXTENSIONS: Tuple[str, ...] = (".ino", ".pde")
ADDITIONAL_FILE_EXTENSIONS: Tuple[str, ...] = (".h", ".c", ".hpp", ".hh", ".cpp", ".S")
SUPPORTED_EXTENSIONS = MAIN_FILE_EXTENSIONS + ADDITIONAL_FILE_EXTENSIONS
MAX_FILE_NAME_LENGTH = 63
NO_METADATA = "No metadata file"

SKETCH_ONLY = frozenset({ProjectType.SKETCH})


def has_supported_extension(name: str) -> bool:
    return any(name.endswith(extension) for extension in SUPPORTED_EXTENSIONS)


def _sketch_file_names(context: ProjectContext) -> List[str]:
    return [path.name for path in context.files.list_files() if has_supported_extension(path.name)]


def name_mismatch(context: ProjectContext) -> RuleReturn:
    """The primary sketch file must be named after the sketch folder."""

    for extension in MAIN_FILE_EXTENSIONS:
        if context.files.exists(context.name + extension):
            return passed()
    return failed(context.name + ".ino")


def prohibited_characters_in_file_name(context: ProjectContext) -> RuleReturn:
    invalid = [name for name in _sketch_file_names(context) if not valid_base_name(name)]
    if invalid:
        return failed(", ".join(invalid))
    return passed()


def file_name_too_long(context: ProjectContext) -> RuleReturn:
    too_long = [
        name
        for name in _sketch_file_names(context)
        if len(name.rsplit(".", 1)[0]) > MAX_FILE_NAME_LENGTH
    ]
    if too_long:
        return failed(", ".join(too_long))
    return passed()


def pde_extension(context: ProjectContext) -> RuleReturn:
    pde_files = [path.name for path in context.files.list_files() if path.suffix == ".pde"]
    if pde_files:
        return failed(", ".join(pde_files))
    return passed()


def incorrect_src_folder_case(context: ProjectContext) -> RuleReturn:
    for path in context.files.list_dirs():
        if path.name.lower() == "src" and path.name != "src":
            return failed(str(path))
    return passed()


def metadata_json_format(context: ProjectContext) -> RuleReturn:
    """sketch.json must be a valid JSON document."""

    metadata = context.metadata
    if not metadata.present:
        return skipped(NO_METADATA)
    if metadata.error:
        return failed(metadata.error)
    return passed()


def metadata_data_format(context: ProjectContext) -> RuleReturn:
    """sketch.json must have the data layout the build tools expect."""

    metadata = context.metadata
    if not metadata.present:
        return skipped(NO_METADATA)
    if metadata.error:
        return failed(metadata.error)
    problem = _sketch_metadata_problem(metadata.data)
    if problem:
        return failed(problem)
    return passed()


def _sketch_metadata_problem(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return "sketch.json must contain an object"

    cpu = data.get("cpu")
    if cpu is not None:
        if not isinstance(cpu, dict):
            return "cpu must be an object"
        for key in ("fqbn", "name", "port"):
            if key in cpu and not isinstance(cpu[key], str):
                return f"cpu.{key} must be a string"

    included_libs = data.get("included_libs")
    if included_libs is not None:
        if not isinstance(included_libs, list) or not all(isinstance(lib, str) for lib in included_libs):
            return "included_libs must be a list of strings"

    secrets = data.get("secrets")
    if secrets is not None:
        if not isinstance(secrets, list):
            return "secrets must be a list"
        for index, secret in enumerate(secrets):
            if not isinstance(secret, dict) or not isinstance(secret.get("name"), str):
                return f"secrets[{index}] must be an object with a string name"
    return None


RULES: Tuple[RuleDescriptor, ...] = (
    RuleDescriptor(
        rule_id="SK001",
        brief="name mismatch",
        category="structure",
        severity=Severity.ERROR,
        project_types=SKETCH_ONLY,
        check=name_mismatch,
    ),
    RuleDescriptor(
        rule_id="SK002",
        brief="prohibited characters in file name",
        category="structure",
        severity=Severity.ERROR,
        project_types=SKETCH_ONLY,
        check=prohibited_characters_in_file_name,
    ),
    RuleDescriptor(
        rule_id="SK003",
        brief="file name too long",
        category="structure",
        severity=Severity.WARNING,
        project_types=SKETCH_ONLY,
        check=file_name_too_long,
    ),
    RuleDescriptor(
        rule_id="SK004",
        brief=".pde extension",
        category="structure",
        severity=Severity.WARNING,
        project_types=SKETCH_ONLY,
        check=pde_extension,
    ),
    RuleDescriptor(
        rule_id="SK005",
        brief="incorrect src folder case",
        category="structure",
        severity=Severity.ERROR,
        project_types=SKETCH_ONLY,
        check=incorrect_src_folder_case,
    ),
    RuleDescriptor(
        rule_id="SK006",
        brief="sketch.json JSON format",
        category="metadata",
        severity=Severity.ERROR,
        project_types=SKETCH_ONLY,
        check=metadata_json_format,
    ),
    RuleDescriptor(
        rule_id="SK007",
        brief="sketch.json data format",
        category="metadata",
        severity=Severity.ERROR,
        project_types=SKETCH_ONLY,
        check=metadata_data_format,
    ),
)
