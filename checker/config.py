"""Configuration file loading and command-line overlay."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .discovery import PROJECT_TYPE_CHOICES
from .errors import ConfigError
from .severity import Severity
from .utils import read_yaml_file

DEFAULT_CONFIG_FILE = ".project-checker.yaml"
OUTPUT_FORMATS = ("text", "json")
CONFIG_KEYS = (
    "blocking_threshold",
    "format",
    "report_file",
    "workers",
    "recursive",
    "project_type",
    "disabled_rules",
    "severity_overrides",
    "verbose",
)


@dataclass(frozen=True)
class Config:
    blocking_threshold: Severity = Severity.ERROR
    output_format: str = "text"
    report_file: Optional[Path] = None
    workers: int = 1
    recursive: bool = False
    project_type: str = "all"
    disabled_rules: Tuple[str, ...] = ()
    severity_overrides: Dict[str, Severity] = field(default_factory=dict)
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(f"Unknown output format {self.output_format!r}")
        if self.project_type not in PROJECT_TYPE_CHOICES:
            raise ConfigError(f"Unknown project type {self.project_type!r}")
        if self.workers < 1:
            raise ConfigError("workers must be at least 1")

    def merge_args(self, args: argparse.Namespace) -> "Config":
        """Return a copy with every command-line value that was given applied."""

        updates: Dict[str, Any] = {}
        if args.blocking_threshold is not None:
            updates["blocking_threshold"] = _severity(args.blocking_threshold, "--blocking-threshold")
        if args.format is not None:
            updates["output_format"] = args.format
        if args.report_file is not None:
            updates["report_file"] = Path(args.report_file)
        if args.workers is not None:
            updates["workers"] = args.workers
        if args.project_type is not None:
            updates["project_type"] = args.project_type
        if args.recursive:
            updates["recursive"] = True
        if args.verbose:
            updates["verbose"] = True
        if args.disable:
            updates["disabled_rules"] = tuple(dict.fromkeys(self.disabled_rules + tuple(args.disable)))
        return replace(self, **updates)


def _severity(value: Any, where: str) -> Severity:
    try:
        return Severity.parse(value)
    except ValueError as exc:
        raise ConfigError(f"{where}: {exc}") from None


def config_from_mapping(data: Mapping[str, Any]) -> Config:
    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    if "blocking_threshold" in data:
        values["blocking_threshold"] = _severity(data["blocking_threshold"], "blocking_threshold")
    if "format" in data:
        values["output_format"] = str(data["format"])
    if data.get("report_file"):
        values["report_file"] = Path(str(data["report_file"]))
    if "workers" in data:
        if not isinstance(data["workers"], int) or isinstance(data["workers"], bool):
            raise ConfigError("workers must be an integer")
        values["workers"] = data["workers"]
    for key in ("recursive", "verbose"):
        if key in data:
            if not isinstance(data[key], bool):
                raise ConfigError(f"{key} must be true or false")
            values[key] = data[key]
    if "project_type" in data:
        values["project_type"] = str(data["project_type"])

    disabled = data.get("disabled_rules") or []
    if not isinstance(disabled, list):
        raise ConfigError("disabled_rules must be a list of rule IDs")
    values["disabled_rules"] = tuple(str(rule_id) for rule_id in disabled)

    overrides = data.get("severity_overrides") or {}
    if not isinstance(overrides, dict):
        raise ConfigError("severity_overrides must map rule IDs to severities")
    values["severity_overrides"] = {
        str(rule_id): _severity(level, f"severity_overrides.{rule_id}") for rule_id, level in overrides.items()
    }
    return Config(**values)


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from YAML; a missing default file yields defaults."""

    explicit = path is not None
    path = Path(path) if explicit else Path(DEFAULT_CONFIG_FILE)
    if explicit and not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        data = read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid configuration file {path}: {exc}") from exc
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return config_from_mapping(data)
