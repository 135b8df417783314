from .base import AbstractResourceGraphClient, AzureRequest
from .resource_graph_client import AzureResourceGraphClient

__all__ = ["AbstractResourceGraphClient", "AzureRequest", "AzureResourceGraphClient"]
