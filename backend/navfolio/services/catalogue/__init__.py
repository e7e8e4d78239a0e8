"""Scheme catalogue services."""

from .scheme_catalogue_service import CatalogueSyncResult, SchemeCatalogueService

__all__ = ["CatalogueSyncResult", "SchemeCatalogueService"]
