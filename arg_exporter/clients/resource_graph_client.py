from types import TracebackType
from typing import Any, Dict, List, Type

import httpx
from azure.core.credentials_async import AsyncTokenCredential
from azure.core.exceptions import AzureError
from loguru import logger

from arg_exporter.clients.base import AbstractResourceGraphClient, AzureRequest
from arg_exporter.config import RESOURCE_GRAPH_API_VERSION
from arg_exporter.errors import AuthenticationUnavailable, QueryTransportError

RESOURCE_GRAPH_ENDPOINT = "providers/Microsoft.ResourceGraph/resources"


class AzureResourceGraphClient(AbstractResourceGraphClient):
    """Async Azure Resource Graph client paging with `$top`/`$skip`."""

    def __init__(
        self,
        credential: AsyncTokenCredential,
        base_url: str,
        api_version: str = RESOURCE_GRAPH_API_VERSION,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.credential = credential
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def scope(self) -> str:
        """Azure Resource scope used for token acquisition (e.g., https://management.azure.com/.default)."""
        return self.base_url + "/.default"

    async def get_headers(self) -> Dict[str, str]:
        try:
            token = (await self.credential.get_token(self.scope)).token
        except AzureError as e:
            raise AuthenticationUnavailable(
                f"Failed to acquire an Azure token for {self.scope}: {e.message}"
            ) from e
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def make_request(self, request: AzureRequest) -> Dict[str, Any]:
        """Make a request to Azure API, translating every failure to QueryTransportError."""
        url = f"{self.base_url}/{request.endpoint.lstrip('/')}"
        logger.debug(f"Making request to {url} with params {request.params}")
        headers = await self.get_headers()
        try:
            response = await self.client.request(
                method=request.method,
                url=url,
                params=request.params,
                json=request.json_body,
                headers=headers,
            )
            response.raise_for_status()
            logger.debug(f"Successfully fetched {request.method} {url}")
            return response.json()

        except httpx.HTTPStatusError as e:
            response = e.response
            logger.error(
                f"Azure API error for '{url}': "
                f"Status {response.status_code}, Response: {response.text}"
            )
            raise QueryTransportError(
                f"Azure Resource Graph returned status {response.status_code}",
                status_code=response.status_code,
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"Network error for endpoint '{url}': {str(e)}")
            raise QueryTransportError(
                f"Network error while querying Azure Resource Graph: {e!r}"
            ) from e

        except ValueError as e:
            raise QueryTransportError(
                f"Azure Resource Graph returned a non-JSON response: {e}"
            ) from e

    async def query_page(
        self, query: str, page_size: int, skip: int
    ) -> List[Dict[str, Any]]:
        request = AzureRequest(
            method="POST",
            endpoint=RESOURCE_GRAPH_ENDPOINT,
            params={"api-version": self.api_version},
            json_body={
                "query": query,
                "options": {
                    "$top": page_size,
                    "$skip": skip,
                    "resultFormat": "objectArray",
                },
            },
        )
        response = await self.make_request(request)
        if not isinstance(response, dict):
            raise QueryTransportError(
                f"Expected a JSON object from Resource Graph, got {type(response).__name__}"
            )

        data = response.get("data")
        if data is None:
            return []
        if not isinstance(data, list):
            raise QueryTransportError(
                f"Expected a list of records in the Resource Graph response, got {type(data).__name__}"
            )

        logger.debug(
            f"Retrieved batch of {response.get('count', len(data))} out of "
            f"{response.get('totalRecords', 'unknown')} total records at offset {skip}"
        )
        return data

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "AzureResourceGraphClient":
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()
