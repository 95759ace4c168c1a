from __future__ import annotations

from app.domain.entities.service_catalog import ServiceCatalogEntry


def _entries(*pairs: tuple[str, float]) -> list[ServiceCatalogEntry]:
    return [ServiceCatalogEntry(name=name, price=price) for name, price in pairs]


# Declaration order matters: the first category is the resolver's fallback.
SERVICE_CATALOG: dict[str, list[ServiceCatalogEntry]] = {
    "< 1000 sq ft": _entries(
        ("HDR Photography", 149.99),
        ("360° Virtual Tour", 159.99),
        ("Social Media Reel", 179.99),
        ("Drone Aerial Photos", 124.99),
        ("Drone Aerial Video", 124.99),
        ("2D Floor Plan", 89.99),
        ("3D House Model", 149.99),
        ("Property Website", 99.99),
        ("Custom Domain Name", 24.99),
        ("Virtual Staging", 39.99),
    ),
    "1000-2000 sq ft": _entries(
        ("HDR Photography", 199.99),
        ("360° Virtual Tour", 189.99),
        ("Social Media Reel", 199.99),
        ("Drone Aerial Photos", 124.99),
        ("Drone Aerial Video", 124.99),
        ("2D Floor Plan", 119.99),
        ("3D House Model", 179.99),
        ("Property Website", 99.99),
        ("Custom Domain Name", 24.99),
        ("Virtual Staging", 39.99),
    ),
    "2000-3000 sq ft": _entries(
        ("HDR Photography", 249.99),
        ("360° Virtual Tour", 219.99),
        ("Social Media Reel", 219.99),
        ("Drone Aerial Photos", 124.99),
        ("Drone Aerial Video", 124.99),
        ("2D Floor Plan", 149.99),
        ("3D House Model", 209.99),
        ("Property Website", 99.99),
        ("Custom Domain Name", 24.99),
        ("Virtual Staging", 39.99),
    ),
    "3000-4000 sq ft": _entries(
        ("HDR Photography", 299.99),
        ("360° Virtual Tour", 249.99),
        ("Social Media Reel", 239.99),
        ("Drone Aerial Photos", 124.99),
        ("Drone Aerial Video", 124.99),
        ("2D Floor Plan", 179.99),
        ("3D House Model", 239.99),
        ("Property Website", 99.99),
        ("Custom Domain Name", 24.99),
        ("Virtual Staging", 39.99),
    ),
    "4000-5000 sq ft": _entries(
        ("HDR Photography", 349.99),
        ("360° Virtual Tour", 279.99),
        ("Social Media Reel", 259.99),
        ("Drone Aerial Photos", 124.99),
        ("Drone Aerial Video", 124.99),
        ("2D Floor Plan", 209.99),
        ("3D House Model", 269.99),
        ("Property Website", 99.99),
        ("Custom Domain Name", 24.99),
        ("Virtual Staging", 39.99),
    ),
}
