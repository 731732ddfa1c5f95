"""Pydantic schemas describing the outcome of processing a file."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ProcessingStatus(str, Enum):
    """Terminal states for a processed Hilltop file."""

    processed = "processed"
    failed = "failed"


class SkippedMeasurement(BaseModel):
    """A measurement dropped because its site or parameter is unmapped."""

    kind: str
    name: str


class FileResult(BaseModel):
    """Summary of one file's decode, assembly and delivery."""

    path: str
    status: ProcessingStatus
    agency: Optional[str] = None
    measurement_count: int = Field(default=0, ge=0)
    observation_count: int = Field(default=0, ge=0)
    delivered_count: int = Field(default=0, ge=0)
    skipped: List[SkippedMeasurement] = Field(default_factory=list)
    processing_ms: Optional[int] = Field(
        default=None, description="Duration in milliseconds from start to finish."
    )
    error: Optional[str] = None
