from __future__ import annotations

from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from services.mappings import MappingTable
from settings import get_settings


@dataclass(frozen=True)
class CLIConfig:
    network: str
    method: str
    sites: MappingTable = field(default_factory=MappingTable)
    dry_run: bool = False
    region: Optional[str] = None
    queue: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    local_timezone: Optional[tzinfo] = None


def _read_timezone(name: Optional[str]) -> Optional[tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {name!r}") from exc


def load_config(
    network: Optional[str] = None,
    method: Optional[str] = None,
    sites: Iterable[str] = (),
    dry_run: bool = False,
    region: Optional[str] = None,
    queue: Optional[str] = None,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    timezone_name: Optional[str] = None,
) -> CLIConfig:
    """Merge command line values over the environment and validate them."""
    settings = get_settings()
    if not method:
        raise ValueError("no FITS method given")
    if not network:
        raise ValueError("no FITS network given")

    site_table = MappingTable.from_assignments(sites)
    region = region or settings.region
    queue = queue or settings.queue_name
    if not dry_run:
        if not region and settings.queue_backend == "sqs":
            raise ValueError(
                "unable to find region in environment or command line [AWS_FITS_REGION]"
            )
        if not queue:
            raise ValueError(
                "unable to find queue in environment or command line [AWS_FITS_QUEUE]"
            )

    return CLIConfig(
        network=network,
        method=method,
        sites=site_table,
        dry_run=dry_run,
        region=region,
        queue=queue,
        access_key=access_key,
        secret_key=secret_key,
        local_timezone=_read_timezone(timezone_name or settings.local_timezone),
    )
