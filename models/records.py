"""Domain models decoded from Hilltop XML files."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Reading:
    """A single timestamped value parsed from a ``<V>`` line."""

    timestamp: datetime
    value: float


@dataclass(frozen=True, slots=True)
class Measurement:
    """One ``<Measurement>`` element with its raw value lines."""

    site_name: str
    parameter_name: str
    num_items: str = ""
    interpolation: str = ""
    date_format: str = ""
    raw_value_lines: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class HilltopDocument:
    """Root of a decoded Hilltop file."""

    agency: str = ""
    measurements: Tuple[Measurement, ...] = field(default_factory=tuple)
