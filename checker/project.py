"""Read-only view of one discovered project handed to every rule."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from .errors import ProjectPathError


class ProjectType(str, Enum):
    SKETCH = "sketch"
    LIBRARY = "library"


@dataclass(frozen=True)
class MetadataResult:
    """Outcome of pre-loading a project's metadata file.

    ``path`` is ``None`` when the project has no metadata file. When the file
    exists but could not be parsed, ``error`` holds the parser message and
    ``data`` is ``None``.
    """

    path: Optional[Path] = None
    data: Any = None
    error: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.path is not None

    @property
    def loaded(self) -> bool:
        return self.present and self.error is None


class ProjectFiles:
    """Read-only filesystem accessor restricted to a project root."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, relative: str = ".") -> Path:
        target = (self._root / relative).resolve()
        if target != self._root and self._root not in target.parents:
            raise ProjectPathError(f"{relative} is outside of project root {self._root}")
        return target

    def exists(self, relative: str) -> bool:
        return self.resolve(relative).exists()

    def list_files(self, relative: str = ".") -> List[Path]:
        """Return the files directly under ``relative``, sorted by name."""

        return sorted(path for path in self.resolve(relative).iterdir() if path.is_file())

    def list_dirs(self, relative: str = ".") -> List[Path]:
        return sorted(path for path in self.resolve(relative).iterdir() if path.is_dir())

    def read_text(self, relative: str) -> str:
        return self.resolve(relative).read_text(encoding="utf-8")


@dataclass(frozen=True)
class ProjectContext:
    """Everything a rule may know about the project under check."""

    path: Path
    project_type: ProjectType
    metadata: MetadataResult = field(default_factory=MetadataResult)
    files: ProjectFiles = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", ProjectFiles(self.path))

    @property
    def identifier(self) -> str:
        return str(self.path)

    @property
    def name(self) -> str:
        return self.files.root.name
