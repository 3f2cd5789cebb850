"""Find sketch and library projects and pre-load their metadata."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import DiscoveryError
from .project import MetadataResult, ProjectContext, ProjectType
from .rules.sketch import MAIN_FILE_EXTENSIONS
from .utils import iter_subdirs, read_text_file

logger = logging.getLogger(__name__)

SKETCH_METADATA = "sketch.json"
LIBRARY_METADATA = "library.properties"
HEADER_EXTENSIONS = (".h", ".hh", ".hpp")
PROJECT_TYPE_CHOICES = ("all", "sketch", "library")
NESTED_PROJECT_FOLDERS = ("examples", "libraries")


def classify(path: Path) -> Optional[ProjectType]:
    """Return the project type rooted at ``path``, if any."""

    if (path / LIBRARY_METADATA).is_file():
        return ProjectType.LIBRARY
    if any(child.is_file() and child.suffix in MAIN_FILE_EXTENSIONS for child in path.iterdir()):
        return ProjectType.SKETCH
    for folder in (path, path / "src"):
        if folder.is_dir() and any(
            child.is_file() and child.suffix in HEADER_EXTENSIONS for child in folder.iterdir()
        ):
            return ProjectType.LIBRARY
    return None


def load_sketch_metadata(path: Path) -> MetadataResult:
    metadata_path = path / SKETCH_METADATA
    if not metadata_path.is_file():
        return MetadataResult()
    try:
        return MetadataResult(path=metadata_path, data=json.loads(read_text_file(metadata_path)))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        return MetadataResult(path=metadata_path, error=f"{SKETCH_METADATA}: {exc}")


def parse_properties(text: str) -> Dict[str, str]:
    """Parse ``key=value`` lines; blank lines and ``#`` comments are ignored."""

    properties: Dict[str, str] = {}
    for number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, separator, value = stripped.partition("=")
        if not separator or not key.strip():
            raise ValueError(f"line {number}: expected key=value, got {stripped!r}")
        properties[key.strip()] = value.strip()
    return properties


def load_library_metadata(path: Path) -> MetadataResult:
    metadata_path = path / LIBRARY_METADATA
    if not metadata_path.is_file():
        return MetadataResult()
    try:
        return MetadataResult(path=metadata_path, data=parse_properties(read_text_file(metadata_path)))
    except (ValueError, UnicodeDecodeError) as exc:
        return MetadataResult(path=metadata_path, error=f"{LIBRARY_METADATA}: {exc}")


def make_context(path: Path, project_type: ProjectType) -> ProjectContext:
    if project_type is ProjectType.SKETCH:
        metadata = load_sketch_metadata(path)
    else:
        metadata = load_library_metadata(path)
    return ProjectContext(path=path, project_type=project_type, metadata=metadata)


def _search(path: Path) -> Iterator[Tuple[Path, ProjectType]]:
    detected = classify(path)
    if detected is None:
        for child in iter_subdirs(path):
            yield from _search(child)
        return
    yield path, detected
    for folder_name in NESTED_PROJECT_FOLDERS:
        folder = path / folder_name
        if folder.is_dir():
            for child in iter_subdirs(folder):
                yield from _search(child)


def find_projects(
    paths: Iterable[str],
    *,
    project_type: str = "all",
    recursive: bool = False,
) -> List[ProjectContext]:
    """Return the projects found under ``paths`` sorted by path.

    Raises ``DiscoveryError`` when a path is missing or unreadable, when a
    non-recursive path is not a project, or when nothing is found at all.
    """

    if project_type not in PROJECT_TYPE_CHOICES:
        raise DiscoveryError(f"Unknown project type {project_type!r}")

    found: Dict[Path, ProjectType] = {}
    for raw_path in paths:
        path = Path(raw_path).resolve()
        if not path.is_dir():
            raise DiscoveryError(f"{raw_path}: not a directory")
        try:
            if recursive:
                hits = list(_search(path))
            else:
                detected = classify(path)
                hits = [(path, detected)] if detected else []
        except OSError as exc:
            raise DiscoveryError(f"{raw_path}: {exc}") from exc
        for candidate, detected in hits:
            if project_type == "all" or detected.value == project_type:
                found[candidate] = detected
        if not hits:
            raise DiscoveryError(f"{raw_path}: no sketch or library found")

    if not found:
        raise DiscoveryError(f"No {project_type} projects found")

    logger.debug("Discovered %d projects", len(found))
    try:
        return [make_context(path, found[path]) for path in sorted(found)]
    except OSError as exc:
        raise DiscoveryError(f"Could not load project metadata: {exc}") from exc
