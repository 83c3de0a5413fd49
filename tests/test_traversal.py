#!/usr/bin/env python3
"""
Test cases for reachability from an entry file.
"""

import tempfile
from pathlib import Path

import pytest

import mukumufu.sources
from mukumufu.errors import AmbiguousImplementationError, RootNotFoundError
from mukumufu.sources import SourceFile, SourceIndex, classify
from mukumufu.traversal import find_cycles, reachable, related_sources, walk


def make_index(files: dict[str, str]) -> SourceIndex:
    """Build an index from in-memory files."""
    return SourceIndex(SourceFile(path, classify(path), text=text) for path, text in files.items())


def paths(sources) -> set[str]:
    return {s.path for s in sources}


class TestGenericWalk:
    """Test the traversal over plain adjacency maps."""

    def test_visits_each_node_once(self):
        graph = {"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []}
        order = list(walk("a", graph.__getitem__))
        assert sorted(order) == ["a", "b", "c", "d"]
        assert order[0] == "a"

    def test_neighbors_computed_once_per_node(self):
        graph = {"a": ["b", "c"], "b": ["c", "a"], "c": ["a", "b"]}
        calls = []

        def neighbors(node):
            calls.append(node)
            return graph[node]

        assert reachable("a", neighbors) == frozenset({"a", "b", "c"})
        assert sorted(calls) == ["a", "b", "c"]

    def test_self_loop(self):
        assert reachable("a", lambda node: [node]) == frozenset({"a"})

    def test_closure_property(self):
        graph = {1: [2, 3], 2: [4], 3: [4, 1], 4: [5], 5: [2], 6: [1]}
        result = reachable(1, graph.__getitem__)
        assert result == frozenset({1, 2, 3, 4, 5})
        for node in result:
            assert set(graph[node]) <= result

    def test_find_cycles(self):
        graph = {"a": ["b"], "b": ["c"], "c": ["a"], "d": ["d"], "e": ["a"]}
        assert find_cycles(graph, graph.__getitem__) == [["a", "b", "c"], ["d"]]

    def test_find_cycles_ignores_outside_nodes(self):
        graph = {"a": ["b"], "b": ["a"]}
        assert find_cycles(["a"], graph.__getitem__) == []

    def test_find_cycles_long_chain(self):
        depth = 1500
        chain = {i: [i + 1] for i in range(depth)}
        chain[depth] = []
        assert find_cycles(chain, chain.__getitem__) == []

        chain[depth] = [0]
        cycles = find_cycles(chain, chain.__getitem__)
        assert cycles == [list(range(depth + 1))]


class TestRelatedSources:
    """Test reachability over source files."""

    def test_cycle_safety(self):
        index = make_index(
            {
                "a.h": '#include "b.h"\n',
                "b.h": '#include "c.h"\n',
                "c.h": '#include "a.h"\n',
                "b.c": '#include "b.h"\n',
                "unrelated.h": "",
            }
        )
        result = related_sources(index, "a.h")
        assert paths(result) == {"a.h", "b.h", "c.h", "b.c"}

    def test_header_only_module(self):
        index = make_index(
            {
                "main.c": '#include "komugiko.h"\n',
                "komugiko.h": "",
            }
        )
        result = related_sources(index, "main")
        assert paths(result) == {"main.c", "komugiko.h"}

    def test_implementation_dependencies_are_followed(self):
        index = make_index(
            {
                "main.c": '#include "a.h"\n',
                "a.h": "",
                "a.c": '#include "a.h"\n#include "b.h"\n',
                "b.h": "",
                "b.c": '#include <stdlib.h>\n',
                "dead.c": '#include "a.h"\n',
            }
        )
        result = related_sources(index, "main")
        assert paths(result) == {"main.c", "a.h", "a.c", "b.h", "b.c"}

    def test_closure_over_neighbors(self):
        index = make_index(
            {
                "main.c": '#include "a.h"\n#include "b.h"\n',
                "a.h": '#include "c.h"\n',
                "a.c": '#include "b.h"\n',
                "b.h": "",
                "c.h": '#include "a.h"\n',
                "c.cc": '#include "d.h"\n',
                "d.h": "",
            }
        )
        result = related_sources(index, "main")
        for source in result:
            assert set(index.neighbors(source)) <= result

    def test_idempotent(self):
        index = make_index(
            {"main.c": '#include "a.h"\n', "a.h": '#include "b.h"\n', "a.c": "", "b.h": ""}
        )
        first = related_sources(index, "main")
        second = related_sources(index, "main")
        assert first == second
        assert sorted(first) == sorted(second)

    def test_root_not_found(self):
        index = make_index({"a.c": ""})
        with pytest.raises(RootNotFoundError):
            related_sources(index, "main")

    def test_ambiguous_implementation_aborts(self):
        index = make_index({"main.c": '#include "a.h"\n', "a.h": "", "a.c": "", "a.cpp": ""})
        with pytest.raises(AmbiguousImplementationError):
            related_sources(index, "main")

    def test_diamond_reads_shared_header_once(self, monkeypatch):
        files = {
            "src/main.c": '#include "a.h"\n#include "b.h"\n',
            "src/a.h": '#include "shared.h"\n',
            "src/b.h": '#include "shared.h"\n',
            "src/shared.h": "",
        }
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            for path, text in files.items():
                (root / path).parent.mkdir(parents=True, exist_ok=True)
                (root / path).write_text(text)

            reads = []
            original = mukumufu.sources.read_source_text

            def counting_read(path):
                reads.append(Path(path).name)
                return original(path)

            monkeypatch.setattr(mukumufu.sources, "read_source_text", counting_read)

            index = SourceIndex.build(root / "src", base_dir=root)
            result = related_sources(index, "main")

            assert sorted(s.path for s in result) == sorted(files)
            assert reads.count("shared.h") == 1
            assert sorted(reads) == ["a.h", "b.h", "main.c", "shared.h"]
