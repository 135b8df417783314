from .resource_graph import FetchResult, ResourceGraphExporter

__all__ = ["FetchResult", "ResourceGraphExporter"]
