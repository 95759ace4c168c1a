from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.service_catalog import ServiceCatalogEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def size_categories(self) -> list[str]:
        """Size categories in declaration order."""
        raise NotImplementedError

    @abstractmethod
    def resolve(self, size_category: str | None) -> list[ServiceCatalogEntry]:
        """
        Resolve the service list for a property size category.
        Never raises and never returns an empty list: unmatched input falls back to the first category.
        """
        raise NotImplementedError

    @abstractmethod
    def get_service(self, size_category: str | None, name: str) -> ServiceCatalogEntry | None:
        """Get catalog entry by service name within the resolved category."""
        raise NotImplementedError
