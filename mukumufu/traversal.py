#!/usr/bin/env python3
"""
Reachability over lazily discovered dependency graphs.

The walk is independent of the node type: callers pass a function returning
the direct neighbors of a node, so the same code serves the source-file graph
and any derived view of it.
"""

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import TypeVar

from mukumufu.sources import SourceFile, SourceIndex

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def walk(root: T, neighbors: Callable[[T], Iterable[T]]) -> Iterator[T]:
    """Yield every node reachable from root exactly once, depth first.

    neighbors is called at most once per node, and cycles terminate.
    """
    visited = {root}
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        # reversed so the first neighbor is expanded first
        for neighbor in reversed(list(neighbors(node))):
            if neighbor not in visited:
                visited.add(neighbor)
                stack.append(neighbor)


def reachable(root: T, neighbors: Callable[[T], Iterable[T]]) -> frozenset[T]:
    """The closure of root under neighbors, root included."""
    return frozenset(walk(root, neighbors))


def related_sources(index: SourceIndex, root: SourceFile | str) -> frozenset[SourceFile]:
    """All files a build rooted at root depends on, root included."""
    if isinstance(root, str):
        root = index.find_root(root)
    result = reachable(root, index.neighbors)
    logger.info(f"{len(result)} files reachable from {root.path}")
    return result


def find_cycles(
    nodes: Iterable[T], neighbors: Callable[[T], Iterable[T]]
) -> list[list[T]]:
    """Find dependency cycles among nodes using Tarjan's algorithm.

    Returns each strongly connected component with more than one member, plus
    single nodes that depend on themselves. Edges leaving nodes are ignored.
    Iterative, so arbitrarily long include chains are fine.
    """
    members = set(nodes)
    counter = 0
    stack = []
    lowlinks = {}
    index = {}
    on_stack = set()
    result = []

    def visit(node):
        nonlocal counter
        index[node] = counter
        lowlinks[node] = counter
        counter += 1
        stack.append(node)
        on_stack.add(node)
        return node, iter(neighbors(node))

    for start in sorted(members):
        if start in index:
            continue
        work = [visit(start)]
        while work:
            node, deps = work[-1]
            for dep in deps:
                if dep not in members:
                    continue
                if dep not in index:
                    work.append(visit(dep))
                    break
                if dep in on_stack:
                    lowlinks[node] = min(lowlinks[node], index[dep])
            else:
                # all dependencies done
                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlinks[parent] = min(lowlinks[parent], lowlinks[node])

                # If node is a root node, pop the stack and create an SCC
                if lowlinks[node] == index[node]:
                    component = []
                    while True:
                        w = stack.pop()
                        on_stack.discard(w)
                        component.append(w)
                        if w == node:
                            break
                    if len(component) > 1 or node in neighbors(node):
                        result.append(sorted(component))

    return sorted(result)
