"""Build dependency inference for C/C++ source trees."""

from mukumufu.config import ProjectConfig
from mukumufu.errors import (
    AmbiguousImplementationError,
    AmbiguousRootError,
    DuplicateNameError,
    MukumufuError,
    RootNotFoundError,
)
from mukumufu.report import DependencyReport, build_report
from mukumufu.scanner import scan_includes
from mukumufu.sources import FileKind, SourceFile, SourceIndex
from mukumufu.traversal import find_cycles, reachable, related_sources, walk

__all__ = [
    "AmbiguousImplementationError",
    "AmbiguousRootError",
    "DependencyReport",
    "DuplicateNameError",
    "FileKind",
    "MukumufuError",
    "ProjectConfig",
    "RootNotFoundError",
    "SourceFile",
    "SourceIndex",
    "build_report",
    "find_cycles",
    "reachable",
    "related_sources",
    "scan_includes",
    "walk",
]
