"""Error types raised while decoding and normalizing Hilltop files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


class HilltopError(Exception):
    """Base class for failures that abort processing of a file."""


class DecodeError(HilltopError):
    """The input could not be read or is not a usable Hilltop document."""


class ParseError(HilltopError):
    """A value line carried a malformed timestamp or reading."""

    def __init__(
        self,
        message: str,
        line: Optional[str] = None,
        line_number: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.line_number = line_number

    def __str__(self) -> str:
        message = super().__str__()
        if self.line_number is None:
            return message
        return f"{message} (line {self.line_number}: {self.line!r})"


class DeliveryError(HilltopError):
    """An observation could not be handed to the message queue."""


IdentifierKind = Literal["site", "parameter"]


@dataclass(frozen=True, slots=True)
class UnknownIdentifier:
    """Advisory outcome for a measurement whose site or parameter is unmapped."""

    kind: IdentifierKind
    name: str

    @property
    def message(self) -> str:
        label = "site" if self.kind == "site" else "data source"
        return f'skipping unknown {label}: "{self.name}"'
