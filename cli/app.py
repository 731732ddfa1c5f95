from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import render_document, render_results
from logging_config import configure_logging
from models.results import ProcessingStatus
from services.assembler import ObservationAssembler
from services.decoder import codec_charset_hook, decode_document
from services.errors import HilltopError
from services.mappings import HILLTOP_UNITS, MappingTable
from services.processor import IngestProcessor
from transport import MessageQueue, build_default_queue


app = typer.Typer(
    help="Decode Hilltop XML files and send FITS observations to a queue.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _build_queue(config: CLIConfig) -> Optional[MessageQueue]:
    if config.dry_run:
        return None
    try:
        return build_default_queue(
            name=config.queue,
            region=config.region,
            access_key=config.access_key,
            secret_key=config.secret_key,
        )
    except (ValueError, HilltopError) as exc:
        _fail(str(exc))
    return None


@app.callback()
def main() -> None:
    """Entry point for the CLI."""


@app.command("send")
def send_command(
    files: List[Path] = typer.Argument(
        ..., dir_okay=False, help="Hilltop XML files to process."
    ),
    network: Optional[str] = typer.Option(None, "--network", help="FITS network id."),
    method: Optional[str] = typer.Option(None, "--method", help="FITS method id."),
    sites: List[str] = typer.Option(
        [], "--site", help='Source name to site id conversion ["label"="code"], repeatable.'
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Don't actually send the messages."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every encoded message."),
    region: Optional[str] = typer.Option(
        None, "--region", help='AWS region, overrides env variable "AWS_FITS_REGION".'
    ),
    queue: Optional[str] = typer.Option(
        None, "--queue", help='SQS queue name, overrides env variable "AWS_FITS_QUEUE".'
    ),
    key: Optional[str] = typer.Option(
        None, "--key", help="AWS access key id, overrides env and credentials file."
    ),
    secret: Optional[str] = typer.Option(
        None, "--secret", help="AWS secret key, overrides env and credentials file."
    ),
    timezone_name: Optional[str] = typer.Option(
        None,
        "--timezone",
        help="IANA zone for non-UTC Hilltop dates (defaults to HILLTOP_LOCAL_TIMEZONE or host time).",
    ),
    keep_going: bool = typer.Option(
        False, "--keep-going", help="Continue with later files after a failure."
    ),
) -> None:
    """Decode Hilltop files and deliver their observations."""
    configure_logging(logging.DEBUG if verbose else None)
    try:
        config = load_config(
            network=network,
            method=method,
            sites=sites,
            dry_run=dry_run,
            region=region,
            queue=queue,
            access_key=key,
            secret_key=secret,
            timezone_name=timezone_name,
        )
    except ValueError as exc:
        _fail(str(exc))

    assembler = ObservationAssembler(
        site_mapping=config.sites,
        unit_mapping=HILLTOP_UNITS,
        network_id=config.network,
        method_id=config.method,
        local_timezone=config.local_timezone,
    )
    processor = IngestProcessor(
        assembler=assembler,
        queue=_build_queue(config),
        charset_hook=codec_charset_hook,
        dry_run=config.dry_run,
    )
    results = processor.process_files(files, keep_going=keep_going)
    render_results(results)

    if any(result.status is ProcessingStatus.failed for result in results):
        raise typer.Exit(code=1)


@app.command("inspect")
def inspect_command(
    file: Path = typer.Argument(..., dir_okay=False, help="Hilltop XML file."),
    sites: List[str] = typer.Option(
        [], "--site", help='Source name to site id conversion ["label"="code"], repeatable.'
    ),
) -> None:
    """Show the measurements of a file and how they resolve."""
    try:
        site_table = MappingTable.from_assignments(sites)
        document = decode_document(file, charset_hook=codec_charset_hook)
    except (ValueError, HilltopError) as exc:
        _fail(str(exc))
    render_document(document, site_table, HILLTOP_UNITS)
