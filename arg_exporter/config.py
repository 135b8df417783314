from typing import Any, Literal

from pydantic import BaseSettings, Field, validator
from pydantic.env_settings import EnvSettingsSource, InitSettingsSource

LogLevelType = Literal["ERROR", "WARNING", "INFO", "DEBUG", "CRITICAL"]

DEFAULT_AZURE_BASE_URL = "https://management.azure.com"
RESOURCE_GRAPH_API_VERSION = "2024-04-01"
MAX_PAGE_SIZE = 1000


class ExporterSettings(BaseSettings):
    azure_base_url: str = DEFAULT_AZURE_BASE_URL
    api_version: str = RESOURCE_GRAPH_API_VERSION
    page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    max_iterations: int = Field(default=1000, ge=1)
    json_depth: int = Field(default=10, ge=1)
    http_timeout: float | None = None

    azure_tenant_id: str | None = None
    azure_client_id: str | None = None
    azure_client_secret: str | None = None

    log_level: LogLevelType = "INFO"

    class Config:
        env_prefix = "ARG_EXPORTER__"
        env_file = ".env"
        env_file_encoding = "utf-8"

        @classmethod
        def customise_sources(  # type: ignore
            cls,
            init_settings: InitSettingsSource,
            env_settings: EnvSettingsSource,
            *_,
            **__,
        ):
            return init_settings, env_settings

    @validator("azure_base_url")
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def uses_service_principal(self) -> bool:
        return any(
            (self.azure_tenant_id, self.azure_client_id, self.azure_client_secret)
        )

    def override(self, **values: Any) -> "ExporterSettings":
        """Return a copy with every non-None value in `values` applied and re-validated."""
        updates = {key: value for key, value in values.items() if value is not None}
        if not updates:
            return self
        return ExporterSettings(**{**self.dict(), **updates})
