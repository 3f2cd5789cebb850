"""Utility helpers for the checker."""

from .fileio import iter_subdirs, read_text_file, read_yaml_file

__all__ = [
    "iter_subdirs",
    "read_text_file",
    "read_yaml_file",
]
