from pathlib import Path
from typing import Sequence

from loguru import logger

from arg_exporter.auth import AzureSession, ensure_authenticated
from arg_exporter.clients import AbstractResourceGraphClient, AzureResourceGraphClient
from arg_exporter.config import ExporterSettings
from arg_exporter.errors import OutputFolderError
from arg_exporter.exporters import ResourceGraphExporter
from arg_exporter.models import ExportReport


def prepare_output_folder(output_folder: Path) -> Path:
    try:
        output_folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputFolderError(
            f"Failed to create output folder {output_folder}: {e}"
        ) from e
    return output_folder


async def run_export(
    resource_types: Sequence[str],
    output_folder: Path,
    subscription_id: str | None = None,
    *,
    session: AzureSession,
    settings: ExporterSettings,
    client: AbstractResourceGraphClient | None = None,
) -> ExportReport:
    """
    Export each resource type in `resource_types` to `output_folder`.

    Authentication and output folder failures abort the run. Failures of a
    single resource type are recorded in the returned report and the
    remaining types are still exported.
    """
    if not resource_types:
        raise ValueError("At least one resource type is required")
    blank = [rt for rt in resource_types if not rt.strip()]
    if blank:
        raise ValueError("Resource types must not be blank")

    await ensure_authenticated(session)
    prepare_output_folder(output_folder)
    logger.info(
        f"Exporting {len(resource_types)} resource types to {output_folder.resolve()}"
    )

    if client is not None:
        return await _export(
            client, resource_types, output_folder, subscription_id, settings
        )

    async with AzureResourceGraphClient(
        credential=session.credential,
        base_url=settings.azure_base_url,
        api_version=settings.api_version,
        timeout=settings.http_timeout,
    ) as graph_client:
        return await _export(
            graph_client, resource_types, output_folder, subscription_id, settings
        )


async def _export(
    client: AbstractResourceGraphClient,
    resource_types: Sequence[str],
    output_folder: Path,
    subscription_id: str | None,
    settings: ExporterSettings,
) -> ExportReport:
    exporter = ResourceGraphExporter(
        client,
        page_size=settings.page_size,
        max_iterations=settings.max_iterations,
        json_depth=settings.json_depth,
    )
    report = await exporter.run(resource_types, output_folder, subscription_id)
    for failed in report.failed:
        logger.warning(
            f"Resource type {failed.resource_type} did not export completely: {failed.error}"
        )
    logger.info(
        f"Export finished: {len(report.resource_types) - len(report.failed)}/"
        f"{len(report.resource_types)} resource types exported without errors"
    )
    return report
