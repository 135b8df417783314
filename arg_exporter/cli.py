# -*- coding: utf-8 -*-
import asyncio
import sys
from pathlib import Path
from typing import Sequence

import click
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from arg_exporter import __version__
from arg_exporter.auth import create_session
from arg_exporter.config import ExporterSettings, LogLevelType
from arg_exporter.errors import ArgExporterException
from arg_exporter.export import run_export
from arg_exporter.helpers.files import default_output_folder
from arg_exporter.log import setup_logger
from arg_exporter.models import (
    ExportReport,
    ExportStatus,
    FetchOutcome,
    ResourceTypeReport,
)

EXIT_PARTIAL_FAILURE = 1
EXIT_FATAL = 2

console = Console()


def print_report(report: ExportReport) -> None:
    table = Table(title=f"Export to {report.output_folder}")
    table.add_column("Resource type")
    table.add_column("Status")
    table.add_column("Records", justify="right")
    table.add_column("Pages", justify="right")
    table.add_column("File")
    table.add_column("Note")

    for item in report.resource_types:
        style = "red" if item.failed else None
        if item.status == ExportStatus.EMPTY and not item.failed:
            style = "yellow"
        table.add_row(
            item.resource_type,
            item.status.value,
            str(item.record_count),
            str(item.pages_fetched),
            item.file_path.name if item.file_path else "-",
            _note(item),
            style=style,
        )
    console.print(table)


def _note(item: ResourceTypeReport) -> str:
    if item.error:
        return item.error
    if item.outcome == FetchOutcome.TRUNCATED:
        return "truncated at the page limit"
    return ""


async def _export(
    settings: ExporterSettings,
    resource_types: Sequence[str],
    output_folder: Path,
    subscription_id: str | None,
) -> ExportReport:
    async with create_session(settings) as session:
        return await run_export(
            resource_types,
            output_folder,
            subscription_id,
            session=session,
            settings=settings,
        )


@click.command()
@click.argument("resource_types", nargs=-1, required=True)
@click.option(
    "-o",
    "--output-folder",
    "output_folder",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="""Folder to write one JSON file per resource type into.
            Created if missing. If not specified, defaults to
            ./arg-output/<yyyyMMdd-HHmmss>.""",
)
@click.option(
    "-s",
    "--subscription-id",
    "subscription_id",
    default=None,
    help="Only export resources from this subscription.",
)
@click.option(
    "-l",
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="""Set the logging level. If not specified, uses
            ARG_EXPORTER__LOG_LEVEL or INFO.""",
)
@click.option(
    "--max-iterations",
    "max_iterations",
    type=int,
    default=None,
    help="Maximum number of pages fetched per resource type (default 1000).",
)
@click.option(
    "--depth",
    "json_depth",
    type=int,
    default=None,
    help="Maximum nesting depth written to the JSON files (default 10).",
)
@click.option(
    "--page-size",
    "page_size",
    type=int,
    default=None,
    help="Number of records requested per page, at most 1000.",
)
@click.version_option(__version__, prog_name="arg-export")
def cli_start(
    resource_types: tuple[str, ...],
    output_folder: Path | None,
    subscription_id: str | None,
    log_level: LogLevelType | None,
    max_iterations: int | None,
    json_depth: int | None,
    page_size: int | None,
) -> None:
    """
    Exports Azure Resource Graph records of each RESOURCE_TYPES entry
    (e.g. Microsoft.Compute/virtualMachines) to its own JSON file.
    """
    try:
        settings = ExporterSettings().override(
            log_level=log_level,
            max_iterations=max_iterations,
            json_depth=json_depth,
            page_size=page_size,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    setup_logger(settings.log_level, settings.azure_client_secret)
    output_folder = output_folder or default_output_folder()

    try:
        report = asyncio.run(
            _export(settings, resource_types, output_folder, subscription_id)
        )
    except (ArgExporterException, ValueError) as e:
        logger.error(f"Export aborted: {e}")
        sys.exit(EXIT_FATAL)

    print_report(report)
    if not report.succeeded:
        sys.exit(EXIT_PARTIAL_FAILURE)
