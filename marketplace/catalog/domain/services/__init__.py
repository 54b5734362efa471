from .catalog_service import CatalogService, build_context

__all__ = [
    "CatalogService",
    "build_context",
]
