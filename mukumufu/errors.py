"""Fatal errors raised while indexing and traversing a source tree."""


class MukumufuError(Exception):
    """Base class for errors that abort a dependency scan."""


class DuplicateNameError(MukumufuError):
    """Two files in the index share a base name."""

    def __init__(self, name: str, paths: list[str]):
        self.name = name
        self.paths = sorted(paths)
        super().__init__(f"file name conflict for {name!r}: {self.paths}")


class AmbiguousImplementationError(MukumufuError):
    """A header's module name matches more than one implementation file."""

    def __init__(self, header: str, candidates: list[str]):
        self.header = header
        self.candidates = sorted(candidates)
        super().__init__(
            f"multiple implementations exist for header {header!r}: {self.candidates}"
        )


class RootNotFoundError(MukumufuError):
    """The entry file cannot be resolved in the index."""

    def __init__(self, designator: str):
        self.designator = designator
        super().__init__(f"root file {designator!r} not found")


class AmbiguousRootError(MukumufuError):
    """A module name matches several records and none can be preferred."""

    def __init__(self, designator: str, candidates: list[str]):
        self.designator = designator
        self.candidates = sorted(candidates)
        super().__init__(f"{designator!r} is ambiguous: {self.candidates}")
