"""Abstract repository for the storefront catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.service import Service


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, service_id: str) -> Service | None:
        """Return a service by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Service]:
        """Return the current catalog."""

    @abstractmethod
    def replace_all(self, services: list[Service]) -> None:
        """Replace the whole catalog with a freshly mapped batch."""
