from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from loguru import logger

from arg_exporter.clients.base import AbstractResourceGraphClient
from arg_exporter.config import MAX_PAGE_SIZE
from arg_exporter.errors import ExportWriteError, QueryTransportError
from arg_exporter.helpers.files import export_file_name, write_json_file
from arg_exporter.helpers.queries import ResourceTypeQuery
from arg_exporter.helpers.serialization import serialize_records
from arg_exporter.models import (
    ExportReport,
    ExportStatus,
    FetchOutcome,
    ResourceTypeReport,
)

DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_JSON_DEPTH = 10


@dataclass
class FetchResult:
    records: List[Dict[str, Any]] = field(default_factory=list)
    pages: int = 0
    outcome: FetchOutcome = FetchOutcome.COMPLETE
    error: str | None = None


class ResourceGraphExporter:
    """Exports every record of the requested resource types to one JSON file per type."""

    def __init__(
        self,
        client: AbstractResourceGraphClient,
        page_size: int = MAX_PAGE_SIZE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        json_depth: int = DEFAULT_JSON_DEPTH,
    ) -> None:
        self.client = client
        self.page_size = page_size
        self.max_iterations = max_iterations
        self.json_depth = json_depth

    async def fetch_resources(self, query: ResourceTypeQuery) -> FetchResult:
        """
        Page through `query` until a short or empty page, a failed request,
        or the iteration bound ends the loop. Records fetched before the loop
        ended are always kept.
        """
        result = FetchResult()
        skip = 0
        iteration = 0

        while True:
            if iteration >= self.max_iterations:
                logger.warning(
                    f"Reached the limit of {self.max_iterations} pages for {query.resource_type}, "
                    f"exporting the {len(result.records)} records fetched so far"
                )
                result.outcome = FetchOutcome.TRUNCATED
                break
            iteration += 1

            try:
                page = await self.client.query_page(query.text, self.page_size, skip)
            except QueryTransportError as e:
                logger.warning(
                    f"Failed to query {query.resource_type} at offset {skip}: {e}"
                )
                result.outcome = FetchOutcome.QUERY_FAILED
                result.error = str(e)
                break

            if not page:
                break

            result.records.extend(page)
            result.pages += 1
            logger.debug(
                f"Fetched page {result.pages} of {query.resource_type} with {len(page)} records"
            )
            if len(page) < self.page_size:
                break
            skip += self.page_size

        return result

    async def export_resource_type(
        self,
        resource_type: str,
        output_folder: Path,
        subscription_id: str | None = None,
    ) -> ResourceTypeReport:
        query = ResourceTypeQuery(
            resource_type=resource_type, subscription_id=subscription_id
        )
        logger.info(f"Querying resources of type {query.resource_type}")
        result = await self.fetch_resources(query)

        report = ResourceTypeReport(
            resource_type=query.resource_type,
            status=ExportStatus.EMPTY,
            outcome=result.outcome,
            record_count=len(result.records),
            pages_fetched=result.pages,
            error=result.error,
        )
        if not result.records:
            logger.info(
                f"No resources found for {query.resource_type}, skipping file creation"
            )
            return report

        file_path = output_folder / export_file_name(query.resource_type)
        try:
            self._write_export(result.records, file_path)
        except ExportWriteError as e:
            logger.warning(f"Failed to export {query.resource_type}: {e}")
            report.status = ExportStatus.WRITE_FAILED
            report.error = str(e)
            return report

        logger.info(
            f"Exported {len(result.records)} resources of type {query.resource_type} to {file_path}"
        )
        report.status = ExportStatus.WRITTEN
        report.file_path = file_path
        return report

    async def run(
        self,
        resource_types: Sequence[str],
        output_folder: Path,
        subscription_id: str | None = None,
    ) -> ExportReport:
        report = ExportReport(output_folder=output_folder)
        for resource_type in resource_types:
            report.resource_types.append(
                await self.export_resource_type(
                    resource_type, output_folder, subscription_id
                )
            )
        return report

    def _write_export(self, records: List[Dict[str, Any]], file_path: Path) -> None:
        try:
            content = serialize_records(records, self.json_depth)
        except (TypeError, ValueError, RecursionError) as e:
            raise ExportWriteError(f"Failed to serialize records: {e}") from e
        try:
            write_json_file(file_path, content)
        except (OSError, ValueError) as e:
            raise ExportWriteError(f"Failed to write {file_path}: {e}") from e
