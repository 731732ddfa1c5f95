from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

import typer

from models.records import HilltopDocument
from models.results import FileResult, ProcessingStatus
from services.assembler import resolve_measurement
from services.errors import UnknownIdentifier


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_result(result: FileResult) -> None:
    echo_heading(f"File {result.path}")
    color = typer.colors.GREEN if result.status is ProcessingStatus.processed else typer.colors.RED
    typer.secho(f"status: {result.status.value}", fg=color)
    echo_key_values(
        [
            ("agency", result.agency),
            ("measurements", result.measurement_count),
            ("observations", result.observation_count),
            ("delivered", result.delivered_count),
            ("processing_ms", result.processing_ms),
        ]
    )
    if result.skipped:
        typer.echo("skipped:")
        for item in result.skipped:
            typer.echo(f"  - {item.kind}: {item.name}")
    if result.error:
        typer.secho(f"error: {result.error}", fg=typer.colors.RED, err=True)


def render_results(results: Sequence[FileResult]) -> None:
    for index, result in enumerate(results):
        if index:
            typer.echo()
        render_result(result)


def render_document(
    document: HilltopDocument,
    site_mapping: Mapping[str, str],
    unit_mapping: Mapping[str, str],
) -> None:
    echo_heading("Document")
    echo_key_values(
        [("agency", document.agency), ("measurements", len(document.measurements))]
    )
    for measurement in document.measurements:
        typer.echo()
        echo_heading(f"{measurement.site_name} / {measurement.parameter_name}")
        echo_key_values(
            [
                ("num_items", measurement.num_items or "-"),
                ("interpolation", measurement.interpolation or "-"),
                ("date_format", measurement.date_format or "-"),
                ("value_lines", len(measurement.raw_value_lines)),
            ]
        )
        resolution = resolve_measurement(measurement, site_mapping, unit_mapping)
        if isinstance(resolution, UnknownIdentifier):
            typer.secho(f"resolution: unknown {resolution.kind}", fg=typer.colors.YELLOW)
        else:
            typer.echo(f"resolution: site={resolution.site_id} type={resolution.type_id}")
