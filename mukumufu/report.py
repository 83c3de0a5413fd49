"""Dependency tables derived from the files reachable from a root."""

import logging

from pydantic import BaseModel, Field

from mukumufu.sources import SourceFile, SourceIndex
from mukumufu.traversal import find_cycles, related_sources

logger = logging.getLogger(__name__)


class DependencyReport(BaseModel):
    """Everything the Makefile and graph writers need, in stable order."""

    root: str = Field(description="Path of the entry file")
    files: list[str] = Field(description="Every reachable file")
    compile_units: list[str] = Field(description="Reachable implementation files")
    include_dirs: list[str] = Field(description="Directories holding reachable headers")
    header_dependencies: dict[str, list[str]] = Field(
        description="Reachable header -> headers it includes directly"
    )
    source_dependencies: dict[str, list[str]] = Field(
        description="Reachable implementation -> headers it includes directly"
    )
    implementations: dict[str, str] = Field(
        description="Reachable header -> its implementation file"
    )
    cycles: list[list[str]] = Field(
        default_factory=list, description="Headers that include each other"
    )

    def direct_dependencies(self, path: str) -> list[str]:
        """Headers directly included by a reachable file."""
        if path in self.header_dependencies:
            return self.header_dependencies[path]
        return self.source_dependencies.get(path, [])

    def is_header(self, path: str) -> bool:
        return path in self.header_dependencies


def _paths(sources: list[SourceFile]) -> list[str]:
    return sorted(s.path for s in sources)


def build_report(index: SourceIndex, root: SourceFile | str) -> DependencyReport:
    """Compute the reachable set from root and tabulate it."""
    if isinstance(root, str):
        root = index.find_root(root)
    reachable = sorted(related_sources(index, root))

    header_dependencies = {}
    source_dependencies = {}
    implementations = {}
    for source in reachable:
        headers = _paths(index.depending_headers(source))
        if source.is_header:
            header_dependencies[source.path] = headers
            implementation = index.resolve_implementation(source)
            if implementation is not None:
                implementations[source.path] = implementation.path
        else:
            source_dependencies[source.path] = headers

    cycles = [
        [s.path for s in component]
        for component in find_cycles(reachable, index.depending_headers)
    ]
    for component in cycles:
        logger.info(f"Include cycle: {' -> '.join(component)}")

    return DependencyReport(
        root=root.path,
        files=[s.path for s in reachable],
        compile_units=[s.path for s in reachable if s.is_implementation],
        include_dirs=sorted({s.dir for s in reachable if s.is_header}),
        header_dependencies=header_dependencies,
        source_dependencies=source_dependencies,
        implementations=implementations,
        cycles=cycles,
    )
