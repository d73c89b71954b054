"""In-process implementation of CatalogRepository.

The catalog is rebuilt from the supplier on every refresh, so nothing is
written to disk.
"""

from __future__ import annotations

from storefront.domain.model.service import Service
from storefront.domain.repository.catalog_repository import CatalogRepository


class InMemoryCatalogRepository(CatalogRepository):

    def __init__(self, services: list[Service] | None = None) -> None:
        self._store: dict[str, Service] = {}
        self.replace_all(services or [])

    def get_by_id(self, service_id: str) -> Service | None:
        return self._store.get(service_id)

    def list_all(self) -> list[Service]:
        return list(self._store.values())

    def replace_all(self, services: list[Service]) -> None:
        self._store = {s.id: s for s in services}
