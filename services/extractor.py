"""Parse the ``<V>`` text lines of a measurement into readings."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone, tzinfo
from typing import List, Optional

from models.records import Measurement, Reading
from services.errors import ParseError

HILLTOP_TIME_FORMAT = "%d-%b-%y %H:%M:%S"
UTC_DATE_FORMAT = "UTC"
_MIN_TOKENS = 3
_TIMESTAMP_SHAPE = re.compile(r"\d{2}-[A-Za-z]{3}-\d{2} \d{2}:\d{2}:\d{2}", re.ASCII)


def parse_timestamp(
    text: str, date_format: str, local_timezone: Optional[tzinfo] = None
) -> datetime:
    """Parse ``DD-Mon-YY HH:MM:SS`` into an aware datetime.

    ``UTC`` formatted data is pinned to UTC. Anything else is read as wall
    clock time in ``local_timezone``, falling back to the zone of the running
    process when none is configured.
    """
    if _TIMESTAMP_SHAPE.fullmatch(text) is None:
        raise ValueError(f"time data {text!r} does not match DD-Mon-YY HH:MM:SS")
    parsed = datetime.strptime(text, HILLTOP_TIME_FORMAT)
    if date_format == UTC_DATE_FORMAT:
        return parsed.replace(tzinfo=timezone.utc)
    if local_timezone is not None:
        return parsed.replace(tzinfo=local_timezone)
    return parsed.astimezone()


def parse_value(text: str) -> float:
    """Parse a finite reading; underscores, NaN and infinities are rejected."""
    if "_" in text:
        raise ValueError(f"invalid literal for a reading: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"reading is not finite: {text!r}")
    return value


def extract_readings(
    measurement: Measurement, local_timezone: Optional[tzinfo] = None
) -> List[Reading]:
    readings: List[Reading] = []
    for line_number, line in enumerate(measurement.raw_value_lines, start=1):
        parts = line.lstrip().split(" ")
        if len(parts) < _MIN_TOKENS:
            continue

        stamp = f"{parts[0]} {parts[1]}"
        try:
            timestamp = parse_timestamp(stamp, measurement.date_format, local_timezone)
        except ValueError as exc:
            raise ParseError(
                f"invalid timestamp {stamp!r}", line=line, line_number=line_number
            ) from exc

        try:
            value = parse_value(parts[2])
        except ValueError as exc:
            raise ParseError(
                f"invalid numeric value {parts[2]!r}", line=line, line_number=line_number
            ) from exc

        readings.append(Reading(timestamp=timestamp, value=value))

    return readings
