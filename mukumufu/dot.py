"""Graphviz DOT rendering of a dependency report.

Usage:
    mukumufu dot > deps.dot
    dot -T png -o deps.png deps.dot
"""

from mukumufu.report import DependencyReport


def quote(identifier: str) -> str:
    escaped = identifier.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def dependency_edges(report: DependencyReport, collapse: bool = False) -> list[tuple[str, str]]:
    """Sorted, de-duplicated edges from each file to what it includes.

    With collapse, a header that has an implementation is represented by that
    implementation, so edges run between compile units where possible.
    """

    def represent(path: str) -> str:
        if collapse:
            return report.implementations.get(path, path)
        return path

    edges = set()
    for path in report.files:
        for dep in report.direct_dependencies(path):
            source, target = represent(path), represent(dep)
            if source != target:
                edges.add((source, target))
    return sorted(edges)


def render_dot(report: DependencyReport, *, collapse: bool = False) -> str:
    nodes = sorted(
        {
            report.implementations.get(path, path) if collapse else path
            for path in report.files
        }
    )
    lines = [f"digraph {quote(report.root)} {{", "  rankdir=LR;"]
    for node in nodes:
        shape = "ellipse" if report.is_header(node) else "box"
        style = ", style=filled" if node == report.root else ""
        lines.append(f"  {quote(node)} [shape={shape}{style}];")
    for source, target in dependency_edges(report, collapse):
        lines.append(f"  {quote(source)} -> {quote(target)};")
    lines.append("}")
    return "\n".join(lines) + "\n"
