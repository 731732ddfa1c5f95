"""Site and unit lookup tables."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Optional


class MappingTable(Mapping[str, str]):
    """Read-only translation from a source name to a canonical code.

    Lookups are exact: no case folding and no whitespace trimming.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[str, str]] = None) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries or {}))

    @classmethod
    def from_assignments(cls, assignments: Iterable[str]) -> "MappingTable":
        """Build a table from ``label=code`` strings; later labels win."""
        entries: Dict[str, str] = {}
        for assignment in assignments:
            label, code = parse_assignment(assignment)
            entries[label] = code
        return cls(entries)

    def lookup(self, name: str) -> Optional[str]:
        return self._entries.get(name)

    def __getitem__(self, name: str) -> str:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._entries)!r})"


def parse_assignment(assignment: str) -> tuple[str, str]:
    parts = assignment.split("=", 1)
    if len(parts) < 2:
        raise ValueError("invalid format: expecting <string>=<string>")
    return parts[0], parts[1]


HILLTOP_UNITS = MappingTable(
    {
        "Air Temperature": "t",
        "Wind Chill": "wc",
        "Relative Humidity": "rh",
        "Rainfall": "rn",
        "Barometric Pressure": "ap",
        "Wind Direction": "wdir",
        "Max Gust": "wg",
        "Average Wind": "wm",
    }
)
