from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field


class FetchOutcome(StrEnum):
    COMPLETE = "complete"
    QUERY_FAILED = "query_failed"
    TRUNCATED = "truncated"


class ExportStatus(StrEnum):
    WRITTEN = "written"
    EMPTY = "empty"
    WRITE_FAILED = "write_failed"


class ResourceTypeReport(BaseModel):
    resource_type: str
    status: ExportStatus
    outcome: FetchOutcome
    record_count: int = 0
    pages_fetched: int = 0
    file_path: Path | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return (
            self.outcome == FetchOutcome.QUERY_FAILED
            or self.status == ExportStatus.WRITE_FAILED
        )


class ExportReport(BaseModel):
    output_folder: Path
    resource_types: list[ResourceTypeReport] = Field(default_factory=list)

    @property
    def failed(self) -> list[ResourceTypeReport]:
        return [report for report in self.resource_types if report.failed]

    @property
    def succeeded(self) -> bool:
        return not self.failed
