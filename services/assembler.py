"""Turn decoded Hilltop documents into canonical observations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import List, Mapping, Optional, Union

from models.observation import CanonicalObservation
from models.records import HilltopDocument, Measurement
from services.errors import UnknownIdentifier
from services.extractor import extract_readings
from services.mappings import HILLTOP_UNITS

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolved:
    """A measurement whose site and parameter both have canonical codes."""

    measurement: Measurement
    site_id: str
    type_id: str


Resolution = Union[Resolved, UnknownIdentifier]


def resolve_measurement(
    measurement: Measurement,
    site_mapping: Mapping[str, str],
    unit_mapping: Mapping[str, str],
) -> Resolution:
    """Look up the site first, then the parameter."""
    site_id = site_mapping.get(measurement.site_name)
    if site_id is None:
        return UnknownIdentifier(kind="site", name=measurement.site_name)
    type_id = unit_mapping.get(measurement.parameter_name)
    if type_id is None:
        return UnknownIdentifier(kind="parameter", name=measurement.parameter_name)
    return Resolved(measurement=measurement, site_id=site_id, type_id=type_id)


@dataclass
class Assembly:
    """Observations built from one document plus the measurements skipped."""

    observations: List[CanonicalObservation] = field(default_factory=list)
    skipped: List[UnknownIdentifier] = field(default_factory=list)


class ObservationAssembler:
    """Resolves identifiers and builds observations for a single run.

    The mapping tables are treated as read-only for the assembler's lifetime.
    """

    def __init__(
        self,
        site_mapping: Mapping[str, str],
        unit_mapping: Mapping[str, str] = HILLTOP_UNITS,
        *,
        network_id: str,
        method_id: str,
        local_timezone: Optional[tzinfo] = None,
    ) -> None:
        if not network_id:
            raise ValueError("no FITS network given")
        if not method_id:
            raise ValueError("no FITS method given")
        self.site_mapping = site_mapping
        self.unit_mapping = unit_mapping
        self.network_id = network_id
        self.method_id = method_id
        self.local_timezone = local_timezone

    def resolve(self, measurement: Measurement) -> Resolution:
        return resolve_measurement(measurement, self.site_mapping, self.unit_mapping)

    def assemble(self, document: HilltopDocument) -> Assembly:
        """Build observations in document order.

        A :class:`~services.errors.ParseError` from any measurement aborts the
        whole document; unmapped measurements are only recorded as skipped.
        """
        assembly = Assembly()
        for measurement in document.measurements:
            resolution = self.resolve(measurement)
            if isinstance(resolution, UnknownIdentifier):
                logger.warning(
                    resolution.message,
                    extra={
                        "site_name": measurement.site_name,
                        "parameter_name": measurement.parameter_name,
                    },
                )
                assembly.skipped.append(resolution)
                continue

            for reading in extract_readings(measurement, self.local_timezone):
                assembly.observations.append(
                    CanonicalObservation(
                        network_id=self.network_id,
                        site_id=resolution.site_id,
                        type_id=resolution.type_id,
                        method_id=self.method_id,
                        date_time=reading.timestamp,
                        value=reading.value,
                        error=0.0,
                    )
                )
        return assembly


def assemble(
    document: HilltopDocument,
    site_mapping: Mapping[str, str],
    unit_mapping: Mapping[str, str],
    network_id: str,
    method_id: str,
) -> List[CanonicalObservation]:
    assembler = ObservationAssembler(
        site_mapping=site_mapping,
        unit_mapping=unit_mapping,
        network_id=network_id,
        method_id=method_id,
    )
    return assembler.assemble(document).observations
