#!/usr/bin/env python3
"""
Tests for include directive scanning.
"""

from mukumufu.scanner import scan_includes


def test_quoted_and_angled_includes():
    text = '#include "foo.h"\n#include <bar/baz.hpp>\nint x;\n'
    assert scan_includes(text) == ["foo.h", "bar/baz.hpp"]


def test_no_directives():
    assert scan_includes("int main(void) { return 0; }\n") == []
    assert scan_includes("") == []


def test_whitespace_and_case_are_tolerated():
    text = "  #  include   \"a.h\"  \n\t#INCLUDE\t\"b.h\"\n#Import <c.h>\n"
    assert scan_includes(text) == ["a.h", "b.h", "c.h"]


def test_import_directive():
    assert scan_includes('#import "Widget.h"\n') == ["Widget.h"]


def test_no_space_after_keyword():
    assert scan_includes('#include"tight.h"\n') == ["tight.h"]


def test_duplicates_are_preserved():
    text = '#include "a.h"\n#include "b.h"\n#include "a.h"\n'
    assert scan_includes(text) == ["a.h", "b.h", "a.h"]


def test_trailing_comments():
    text = '#include "a.h" // for a\n#include "b.h" /* for b */\n'
    assert scan_includes(text) == ["a.h", "b.h"]


def test_malformed_directives_are_ignored():
    text = "\n".join(
        [
            '#include "unterminated.h',
            "#include <unterminated.h",
            "#include MACRO_HEADER",
            '#include_next "next.h"',
            '#include "a.h" trailing junk',
            '// #include "commented.h"',
            'x = 1; #include "inline.h"',
            '#include ""',
        ]
    )
    assert scan_includes(text) == []


def test_conditionals_are_not_evaluated():
    text = '#if 0\n#include "dead.h"\n#endif\n'
    assert scan_includes(text) == ["dead.h"]


def test_windows_line_endings():
    text = '#include "a.h"\r\n#include "b.h"\r\n'
    assert scan_includes(text) == ["a.h", "b.h"]
