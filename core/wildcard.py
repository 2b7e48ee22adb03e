"""
Case-insensitive wildcard matching for program names.

Only two characters are special: '*' matches any run of characters and
'?' matches exactly one. Everything else, brackets included, is literal.
"""

import re
from operator import attrgetter
from typing import Iterable, List

from core.program import ProgramInfo


class WildcardPattern:
    """A compiled wildcard pattern."""

    def __init__(self, pattern: str, ignore_case: bool = True):
        if not pattern:
            raise ValueError("Wildcard pattern must not be empty")

        self.pattern = pattern
        flags = re.IGNORECASE if ignore_case else 0
        self._regex = re.compile(translate(pattern), flags | re.DOTALL)

    def is_match(self, text: str) -> bool:
        return self._regex.fullmatch(text) is not None

    def __repr__(self) -> str:
        return f"WildcardPattern({self.pattern!r})"


def translate(pattern: str) -> str:
    """Translate a wildcard pattern to an (unanchored) regular expression."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


def filter_by_name(programs: Iterable[ProgramInfo], patterns: Iterable[str]) -> List[ProgramInfo]:
    """
    Return the programs whose name matches at least one pattern.

    A program matched by several patterns appears once. The result is
    sorted by name.
    """
    matchers = [WildcardPattern(pattern) for pattern in patterns]
    programs = list(programs)

    # ProgramInfo hashes by identity, so the same record is kept only once
    matched = {}
    for matcher in matchers:
        for program in programs:
            if program not in matched and matcher.is_match(program.name):
                matched[program] = None

    return sorted(matched, key=attrgetter("name"))
