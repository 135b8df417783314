import asyncio
import shutil
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Type

from azure.core.credentials_async import AsyncTokenCredential
from azure.core.exceptions import AzureError, ClientAuthenticationError
from azure.identity.aio import AzureCliCredential, ClientSecretCredential
from loguru import logger

from arg_exporter.config import ExporterSettings
from arg_exporter.errors import AuthenticationUnavailable, MissingAzureCredentials


class AzureSession(ABC):
    """An Azure sign-in the exporter can check and, when missing, start."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url

    @property
    @abstractmethod
    def credential(self) -> AsyncTokenCredential: ...

    @property
    def scope(self) -> str:
        return self.base_url + "/.default"

    async def has_active_session(self) -> bool:
        try:
            await self.credential.get_token(self.scope)
        except ClientAuthenticationError as e:
            logger.debug(f"No active Azure session: {e.message}")
            return False
        except AzureError as e:
            raise AuthenticationUnavailable(
                f"Failed to reach Azure to check the session: {e.message}"
            ) from e
        return True

    @abstractmethod
    async def login(self) -> None: ...

    async def close(self) -> None:
        await self.credential.close()

    async def __aenter__(self) -> "AzureSession":
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()


class AzureCliSession(AzureSession):
    """Reuses the Azure CLI sign-in, running `az login` when there is none."""

    def __init__(self, base_url: str, tenant_id: str | None = None) -> None:
        super().__init__(base_url)
        self.tenant_id = tenant_id
        self._credential = AzureCliCredential(tenant_id=tenant_id or "")

    @property
    def credential(self) -> AsyncTokenCredential:
        return self._credential

    @property
    def login_command(self) -> list[str]:
        command = ["az", "login"]
        if self.tenant_id:
            command += ["--tenant", self.tenant_id]
        return command

    async def login(self) -> None:
        logger.info("No active Azure session found, starting interactive login")
        executable = shutil.which(self.login_command[0])
        if executable is None:
            raise AuthenticationUnavailable(
                "Azure CLI is not installed, cannot start an interactive login"
            )
        try:
            process = await asyncio.create_subprocess_exec(
                executable, *self.login_command[1:]
            )
        except OSError as e:
            raise AuthenticationUnavailable(
                f"Failed to start the Azure CLI login: {e}"
            ) from e

        return_code = await process.wait()
        if return_code != 0:
            raise AuthenticationUnavailable(
                f"Interactive Azure login failed with exit code {return_code}"
            )


class ClientSecretSession(AzureSession):
    def __init__(
        self, base_url: str, tenant_id: str, client_id: str, client_secret: str
    ) -> None:
        super().__init__(base_url)
        self._credential = ClientSecretCredential(
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret,
        )

    @property
    def credential(self) -> AsyncTokenCredential:
        return self._credential

    async def login(self) -> None:
        raise AuthenticationUnavailable(
            "Service principal credentials were rejected by Azure and cannot be refreshed interactively"
        )


def create_session(settings: ExporterSettings) -> AzureSession:
    if not settings.uses_service_principal:
        logger.info("Using the Azure CLI session for authentication")
        return AzureCliSession(settings.azure_base_url, settings.azure_tenant_id)

    if not (
        settings.azure_tenant_id
        and settings.azure_client_id
        and settings.azure_client_secret
    ):
        raise MissingAzureCredentials(
            "Missing Azure credentials: tenant_id, client_id, and client_secret are required."
        )

    logger.info(
        f"Using service principal {settings.azure_client_id} for authentication"
    )
    return ClientSecretSession(
        settings.azure_base_url,
        tenant_id=settings.azure_tenant_id,
        client_id=settings.azure_client_id,
        client_secret=settings.azure_client_secret,
    )


async def ensure_authenticated(session: AzureSession) -> None:
    if await session.has_active_session():
        logger.info("Found an active Azure session")
        return

    await session.login()
    if not await session.has_active_session():
        raise AuthenticationUnavailable(
            "No active Azure session is available after login"
        )
    logger.info("Azure login succeeded")
