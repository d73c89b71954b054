"""Application service: Browse Catalog use case (query)."""

from __future__ import annotations

from storefront.application.dto import ServiceDTO
from storefront.application.mapping import service_to_dto
from storefront.domain.model.service import ALL
from storefront.domain.repository.catalog_repository import CatalogRepository


class BrowseCatalogHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(
        self,
        search: str = "",
        category: str = ALL,
        platform: str = ALL,
    ) -> list[ServiceDTO]:
        return [
            service_to_dto(service)
            for service in self._catalog_repo.list_all()
            if service.matches(search, category, platform)
        ]
