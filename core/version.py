"""
Program version numbers as installers write them to DisplayVersion.
"""

from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple


@total_ordering
@dataclass(frozen=True)
class ProgramVersion:
    """
    A version of the form major.minor[.build[.revision]].

    Missing build/revision components are None and sort before zero,
    so 1.2 < 1.2.0 < 1.2.0.0.
    """

    major: int
    minor: int
    build: Optional[int] = None
    revision: Optional[int] = None

    def _sort_key(self) -> Tuple[int, int, int, int]:
        return (
            self.major,
            self.minor,
            -1 if self.build is None else self.build,
            -1 if self.revision is None else self.revision,
        )

    def __lt__(self, other):
        if not isinstance(other, ProgramVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        parts = [self.major, self.minor, self.build, self.revision]
        return ".".join(str(part) for part in parts if part is not None)


def parse_version(text: Optional[str]) -> Optional[ProgramVersion]:
    """
    Parse a dotted numeric version.

    Two to four components are accepted, each a non-negative integer
    optionally surrounded by whitespace. Anything else ("1", "1.0-beta",
    "v2.0", "") yields None.
    """
    if not isinstance(text, str):
        return None

    parts = text.split(".")
    if not 2 <= len(parts) <= 4:
        return None

    numbers = []
    for part in parts:
        part = part.strip()
        if not part.isascii() or not part.isdigit():
            return None
        numbers.append(int(part))

    return ProgramVersion(*numbers)
