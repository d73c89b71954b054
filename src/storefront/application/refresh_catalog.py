"""Application service: Refresh Catalog use case.

Fetches the supplier catalog, maps and filters it, and replaces the local
catalog wholesale. When the supplier cannot be reached the previously known
catalog stays in place and a retryable error is returned instead.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import CatalogDTO
from storefront.application.external_call import DEFAULT_TIMEOUT, bounded
from storefront.application.mapping import service_to_dto
from storefront.domain.exceptions import ExternalServiceError
from storefront.domain.gateway.supplier_gateway import SupplierGateway
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.catalog_mapper import map_catalog

logger = structlog.get_logger(__name__)

CATALOG_UNAVAILABLE = "Could not load services from the supplier. Please try again."


class RefreshCatalogHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        supplier: SupplierGateway,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._supplier = supplier
        self._timeout = timeout

    async def handle(self) -> CatalogDTO:
        try:
            records = await bounded(
                self._supplier.list_services(), self._timeout, what="Catalog fetch"
            )
        except ExternalServiceError as exc:
            logger.warning("Catalog refresh failed", error=str(exc))
            return CatalogDTO(
                services=[service_to_dto(s) for s in self._catalog_repo.list_all()],
                error=CATALOG_UNAVAILABLE,
            )

        result = map_catalog(records)
        for record, reason in result.invalid:
            logger.info("Dropped invalid catalog record", service_id=record.service_id, reason=reason)

        self._catalog_repo.replace_all(result.services)
        logger.info(
            "Catalog refreshed",
            received=len(records),
            published=len(result.services),
            invalid=len(result.invalid),
            filtered_out=result.filtered_out,
        )
        return CatalogDTO(services=[service_to_dto(s) for s in result.services])
