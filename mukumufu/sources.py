#!/usr/bin/env python3
"""
Source file records and the index that resolves names to them.

Every file under the scanned directory becomes one SourceFile. Headers are
paired with implementation files by module name (base name minus extension),
so base names must be unique across the whole tree.
"""

import fnmatch
import logging
import posixpath
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from mukumufu.config import (
    DEFAULT_HEADER_EXTENSIONS,
    DEFAULT_SOURCE_EXTENSIONS,
    ProjectConfig,
)
from mukumufu.errors import (
    AmbiguousImplementationError,
    AmbiguousRootError,
    DuplicateNameError,
    RootNotFoundError,
)
from mukumufu.scanner import scan_includes

logger = logging.getLogger(__name__)


class FileKind(str, Enum):
    HEADER = "header"
    IMPLEMENTATION = "implementation"


def normalize_path(path: str | Path) -> str:
    """Forward slashes, collapsed separators and no leading './'."""
    text = str(path).replace("\\", "/")
    if not text:
        return text
    return posixpath.normpath(text)


def classify(
    path: str,
    header_extensions: Iterable[str] = DEFAULT_HEADER_EXTENSIONS,
    source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
) -> FileKind | None:
    """Return the kind of a file from its extension, or None if unrecognised."""
    ext = posixpath.splitext(path)[1].lower()
    if ext in header_extensions:
        return FileKind.HEADER
    if ext in source_extensions:
        return FileKind.IMPLEMENTATION
    return None


def read_source_text(path: Path) -> str:
    """Read a source file as text, tolerating legacy encodings."""
    data = path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug(f"{path} is not valid UTF-8, decoding as latin-1")
        return data.decode("latin-1")


@dataclass(eq=False)
class SourceFile:
    """One scanned header or implementation file."""

    path: str
    kind: FileKind
    base_dir: Path | None = None
    text: str | None = field(default=None, repr=False)

    def __post_init__(self):
        self.path = normalize_path(self.path)

    def __hash__(self):
        return hash(self.path)

    def __eq__(self, other):
        return isinstance(other, SourceFile) and self.path == other.path

    def __lt__(self, other: "SourceFile") -> bool:
        return self.path < other.path

    def __str__(self):
        return self.path

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def ext(self) -> str:
        return posixpath.splitext(self.name)[1]

    @property
    def module(self) -> str:
        return posixpath.splitext(self.name)[0]

    @property
    def dir(self) -> str:
        return posixpath.dirname(self.path) or "."

    @property
    def is_header(self) -> bool:
        return self.kind is FileKind.HEADER

    @property
    def is_implementation(self) -> bool:
        return self.kind is FileKind.IMPLEMENTATION

    @property
    def location(self) -> Path:
        """Where the content lives on disk."""
        if self.base_dir is None:
            return Path(self.path)
        return self.base_dir / self.path

    @property
    def content(self) -> str:
        """File text, read on first access and cached."""
        if self.text is None:
            self.text = read_source_text(self.location)
        return self.text


def _excluded(relative_path: str, exclude_globs: Iterable[str]) -> bool:
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in exclude_globs
    )


def discover_sources(
    root_dir: Path,
    *,
    base_dir: Path | None = None,
    header_extensions: Iterable[str] = DEFAULT_HEADER_EXTENSIONS,
    source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
    exclude_globs: Iterable[str] = (),
) -> list[SourceFile]:
    """Find every header and implementation file under root_dir, sorted by path."""
    base = base_dir if base_dir is not None else root_dir
    header_extensions = set(header_extensions)
    source_extensions = set(source_extensions)
    exclude_globs = tuple(exclude_globs)

    sources = []
    for file_path in sorted(root_dir.rglob("*")):
        if not file_path.is_file():
            continue
        relative = file_path.relative_to(base).as_posix()
        kind = classify(relative, header_extensions, source_extensions)
        if kind is None:
            continue
        if _excluded(relative, exclude_globs):
            logger.debug(f"Excluding {relative}")
            continue
        sources.append(SourceFile(relative, kind, base_dir=base))
    return sources


class SourceIndex:
    """All source files of a tree, addressable by path, base name and module."""

    def __init__(self, sources: Iterable[SourceFile]):
        self.sources: list[SourceFile] = []
        self._by_path: dict[str, SourceFile] = {}
        self._by_name: dict[str, SourceFile] = {}
        self._by_module: dict[str, list[SourceFile]] = defaultdict(list)
        self._lookup_cache: dict[tuple[str, bool], SourceFile | None] = {}

        # Write-once per index; a record shared by two indexes may resolve differently in each
        self._headers: dict[str, list[SourceFile]] = {}
        self._implementations: dict[str, SourceFile | None] = {}

        for source in sources:
            if source.path in self._by_path:
                # same logical file supplied twice
                continue
            existing = self._by_name.get(source.name)
            if existing is not None:
                raise DuplicateNameError(source.name, [existing.path, source.path])
            self.sources.append(source)
            self._by_path[source.path] = source
            self._by_name[source.name] = source
            self._by_module[source.module].append(source)

    @classmethod
    def build(
        cls,
        root_dir: Path,
        *,
        base_dir: Path | None = None,
        header_extensions: Iterable[str] = DEFAULT_HEADER_EXTENSIONS,
        source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
        exclude_globs: Iterable[str] = (),
    ) -> "SourceIndex":
        """Index the files under root_dir."""
        root_dir = Path(root_dir)
        if not root_dir.is_dir():
            raise FileNotFoundError(f"Source directory {root_dir} does not exist")
        index = cls(
            discover_sources(
                root_dir,
                base_dir=base_dir,
                header_extensions=header_extensions,
                source_extensions=source_extensions,
                exclude_globs=exclude_globs,
            )
        )
        logger.info(
            f"Indexed {len(index)} files under {root_dir} "
            f"({len(index.headers())} headers, {len(index.implementations())} implementations)"
        )
        return index

    @classmethod
    def from_config(cls, config: ProjectConfig) -> "SourceIndex":
        return cls.build(
            config.source_path(),
            base_dir=config.project_root,
            header_extensions=config.header_extensions,
            source_extensions=config.source_extensions,
            exclude_globs=config.exclude_globs,
        )

    def __len__(self) -> int:
        return len(self.sources)

    def __iter__(self):
        return iter(self.sources)

    def __contains__(self, source: object) -> bool:
        return isinstance(source, SourceFile) and source.path in self._by_path

    def __getitem__(self, designator: str) -> SourceFile:
        return self.find_root(designator)

    def headers(self) -> list[SourceFile]:
        return [s for s in self.sources if s.is_header]

    def implementations(self) -> list[SourceFile]:
        return [s for s in self.sources if s.is_implementation]

    def header_dirs(self) -> list[str]:
        """Sorted directories holding at least one header."""
        return sorted({s.dir for s in self.sources if s.is_header})

    def lookup(self, designator: str, *, match_module: bool = True) -> SourceFile | None:
        """Resolve a path, base name or (optionally) bare module name to a record."""
        key = (designator, match_module)
        if key not in self._lookup_cache:
            self._lookup_cache[key] = self._find(designator, match_module)
        return self._lookup_cache[key]

    def _find(self, designator: str, match_module: bool) -> SourceFile | None:
        path = normalize_path(designator)
        if path in self._by_path:
            return self._by_path[path]

        # "dir/name.h" only matches a record whose path ends with it
        name = posixpath.basename(path)
        source = self._by_name.get(name)
        if source is not None and (path == name or source.path.endswith("/" + path)):
            return source

        if not match_module or posixpath.splitext(name)[1]:
            return None

        candidates = self._by_module.get(name, [])
        implementations = [s for s in candidates if s.is_implementation]
        if len(implementations) == 1:
            return implementations[0]
        if len(implementations) > 1:
            raise AmbiguousRootError(designator, [s.path for s in implementations])
        if len(candidates) > 1:
            raise AmbiguousRootError(designator, [s.path for s in candidates])
        return candidates[0] if candidates else None

    def find_root(self, designator: str) -> SourceFile:
        """Like lookup, but a missing file is an error."""
        source = self.lookup(designator)
        if source is None:
            raise RootNotFoundError(designator)
        return source

    def resolve_implementation(self, header: SourceFile) -> SourceFile | None:
        """The implementation file sharing the header's module name, if any."""
        if header.path not in self._implementations:
            implementations = [
                s for s in self._by_module.get(header.module, []) if s.is_implementation
            ]
            if len(implementations) > 1:
                raise AmbiguousImplementationError(
                    header.path, [s.path for s in implementations]
                )
            self._implementations[header.path] = implementations[0] if implementations else None
        return self._implementations[header.path]

    def depending_headers(self, source: SourceFile) -> list[SourceFile]:
        """Headers directly included by source that exist in the index."""
        if source.path not in self._headers:
            headers: list[SourceFile] = []
            for name in scan_includes(source.content):
                target = self.lookup(name, match_module=False)
                if target is None:
                    logger.debug(f"{source.path}: ignoring unresolved include {name!r}")
                    continue
                if not target.is_header:
                    logger.debug(f"{source.path}: ignoring included implementation {target.path}")
                    continue
                if target not in headers:
                    headers.append(target)
            self._headers[source.path] = headers
        return self._headers[source.path]

    def depending_sources(self, source: SourceFile) -> list[SourceFile]:
        """Implementations of the headers directly included by source."""
        result = []
        for header in self.depending_headers(source):
            implementation = self.resolve_implementation(header)
            if implementation is not None and implementation not in result:
                result.append(implementation)
        return result

    def neighbors(self, source: SourceFile) -> list[SourceFile]:
        """Direct dependencies walked when computing the reachable set."""
        return self.depending_headers(source) + self.depending_sources(source)
