from abc import ABC, abstractmethod
from typing import Any, Dict, List

from pydantic import BaseModel, Extra, Field


class AzureRequest(BaseModel):
    method: str = "GET"
    endpoint: str
    params: Dict[str, Any] = Field(default_factory=dict)
    json_body: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = Extra.forbid


class AbstractResourceGraphClient(ABC):
    """A paged query service for Azure Resource Graph."""

    @abstractmethod
    async def query_page(
        self, query: str, page_size: int, skip: int
    ) -> List[Dict[str, Any]]:
        """
        Fetch at most `page_size` records of `query`, starting at offset `skip`.

        Raises QueryTransportError when the request cannot be completed.
        """
        ...
