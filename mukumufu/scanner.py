"""Textual scanning of #include / #import directives."""

import re

# '#', keyword, then a quoted or angle-bracketed name; an optional trailing
# comment is tolerated.
INCLUDE_PATTERN = re.compile(
    r"""^\s*\#\s*(?:include|import)\s*
        (?:"(?P<quoted>[^"]+)"|<(?P<angled>[^>]+)>)
        \s*(?://.*|/\*.*)?$""",
    re.IGNORECASE | re.VERBOSE,
)


def scan_includes(text: str) -> list[str]:
    """Return the names referenced by include directives, in file order.

    Duplicates are kept. Conditionals are not evaluated, so a directive inside
    an ``#if 0`` block is reported like any other.
    """
    names = []
    for line in text.splitlines():
        match = INCLUDE_PATTERN.match(line)
        if not match:
            continue
        name = (match.group("quoted") or match.group("angled")).strip()
        if name:
            names.append(name)
    return names
