"""Rule-based checker for sketch and library projects."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("project-checker")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
