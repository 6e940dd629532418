"""Internal service layer for metadata lookups."""

from movie_house.services.interfaces import (
    AppServices,
    DefaultMetadataService,
    MetadataService,
    build_default_app_services,
)
from movie_house.services.omdb_service import MetadataTransportError, fetch_page

__all__ = [
    "AppServices",
    "DefaultMetadataService",
    "MetadataService",
    "MetadataTransportError",
    "build_default_app_services",
    "fetch_page",
]
