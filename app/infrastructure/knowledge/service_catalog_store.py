from __future__ import annotations

from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.service_catalog import ServiceCatalogEntry
from app.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, list[ServiceCatalogEntry]] | None = None) -> None:
        self._catalog = catalog or SERVICE_CATALOG

    def size_categories(self) -> list[str]:
        return list(self._catalog.keys())

    def resolve(self, size_category: str | None) -> list[ServiceCatalogEntry]:
        size = size_category or ""
        if size in self._catalog:
            return list(self._catalog[size])

        # Tolerate formatting drift such as "1000-2000 sqft (approx)"
        if size:
            for key in self._catalog:
                if key.split(" ")[0] in size:
                    return list(self._catalog[key])

        first_key = next(iter(self._catalog))
        return list(self._catalog[first_key])

    def get_service(self, size_category: str | None, name: str) -> ServiceCatalogEntry | None:
        for entry in self.resolve(size_category):
            if entry.name == name:
                return entry
        return None
