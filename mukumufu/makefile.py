"""Makefile fragment rendering.

The fragment expects the including Makefile to define CC, CFLAGS, OBJDIR, O
(the object file extension) and CC_OBJ_OUT_FLAG (e.g. ``-o `` or ``/Fo``).
"""

import posixpath

from mukumufu.report import DependencyReport

LIST_SEPARATOR = " \\\n  "


def object_path(source: str) -> str:
    """Object file target for an implementation file."""
    module = posixpath.splitext(posixpath.basename(source))[0]
    return f"$(OBJDIR)/{module}.$(O)"


def compile_command(include_dirs: list[str]) -> str:
    parts = ["$(CC)", "$(CFLAGS)"]
    parts.extend(f"-I{directory}" for directory in include_dirs)
    parts.append("$(CC_OBJ_OUT_FLAG)$@ -c $?")
    return " ".join(parts)


def file_list(name: str, files: list[str]) -> str:
    return LIST_SEPARATOR.join([f"{name} ="] + sorted(files))


def dependency_rules(dependencies: dict[str, list[str]], command: str | None = None) -> str:
    """One `target: deps` line per non-empty entry, sorted."""
    recipe = f"\n\t{command}\n" if command else ""
    rules = [
        f"{target}: {' '.join(sorted(deps))}{recipe}"
        for target, deps in dependencies.items()
        if deps
    ]
    return "\n".join(sorted(rules))


def render_makefile(report: DependencyReport) -> str:
    """Render the OBJS list and the three dependency rule groups."""
    object_sources = {object_path(c): [c] for c in report.compile_units}
    sections = [
        file_list("OBJS", list(object_sources)),
        dependency_rules(report.header_dependencies),
        dependency_rules(report.source_dependencies),
        dependency_rules(object_sources, compile_command(report.include_dirs)),
    ]
    text = "\n\n".join(sections)
    if not text.endswith("\n"):
        text += "\n"
    return text
