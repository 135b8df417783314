from typing import Any, Dict, List, Sequence

from azure.core.credentials import AccessToken
from azure.core.credentials_async import AsyncTokenCredential
from azure.core.exceptions import ClientAuthenticationError, ServiceRequestError

from arg_exporter.auth import AzureSession
from arg_exporter.clients.base import AbstractResourceGraphClient


class _DummyCredential(AsyncTokenCredential):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.closed = False

    async def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        if self.fail:
            raise ClientAuthenticationError("not logged in")
        return AccessToken("dummy-token", 9999999999)

    async def close(self) -> None:
        self.closed = True


class FakeSession(AzureSession):
    def __init__(self, active: bool = True, login_succeeds: bool = True) -> None:
        super().__init__("https://management.azure.com")
        self._credential = _DummyCredential(fail=not active)
        self.login_succeeds = login_succeeds
        self.login_calls = 0

    @property
    def credential(self) -> _DummyCredential:
        return self._credential

    async def login(self) -> None:
        self.login_calls += 1
        if self.login_succeeds:
            self._credential.fail = False


def make_page(prefix: str, size: int, start: int = 0) -> List[Dict[str, Any]]:
    return [
        {"id": f"/{prefix}/{start + i}", "name": f"{prefix}-{start + i}"}
        for i in range(size)
    ]


class StubResourceGraphClient(AbstractResourceGraphClient):
    """
    Serves scripted pages per resource type. A page entry that is an
    exception is raised instead of returned.
    """

    def __init__(
        self, pages: Dict[str, Sequence[Any]], default_page: Any = None
    ) -> None:
        self.pages = pages
        self.default_page = default_page
        self.calls: List[Dict[str, Any]] = []

    async def query_page(
        self, query: str, page_size: int, skip: int
    ) -> List[Dict[str, Any]]:
        resource_type = query.split("'")[1]
        call_index = len(
            [call for call in self.calls if call["resource_type"] == resource_type]
        )
        self.calls.append(
            {
                "resource_type": resource_type,
                "query": query,
                "page_size": page_size,
                "skip": skip,
            }
        )

        scripted = self.pages.get(resource_type, [])
        if call_index < len(scripted):
            page = scripted[call_index]
        else:
            page = self.default_page
        if isinstance(page, Exception):
            raise page
        if callable(page):
            return page(skip)
        return page

    def calls_for(self, resource_type: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["resource_type"] == resource_type]



class _UnreachableCredential(AsyncTokenCredential):
    async def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        raise ServiceRequestError("login.microsoftonline.com is unreachable")

    async def close(self) -> None:
        pass


class UnreachableSession(FakeSession):
    def __init__(self) -> None:
        super().__init__()
        self._unreachable = _UnreachableCredential()

    @property
    def credential(self) -> _UnreachableCredential:  # type: ignore[override]
        return self._unreachable
