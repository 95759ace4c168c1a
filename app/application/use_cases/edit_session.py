from __future__ import annotations

import logging
import math
import re
from dataclasses import fields, replace
from typing import Any

from app.application.dto.booking_record import parse_address, to_record
from app.application.exceptions import FormatError, RemoteError
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.project_folders import ProjectFoldersUseCase
from app.application.use_cases.send_email import SendEmailUseCase
from app.application.utils.pricing import aggregate_total, build_quote
from app.domain.entities.booking import Address, Booking, SelectedService
from app.domain.entities.pricing import PriceQuote
from app.domain.entities.project_folders import ProjectFolders
from app.domain.entities.service_catalog import ServiceCatalogEntry


TIME_HH_MM = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
TIME_HH_MM_SS = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9]$")
DATE_YYYY_MM_DD = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Dates are stored at midday so every timezone renders the same calendar day.
MIDDAY_SUFFIX = "T12:00:00"

_BOOKING_FIELDS = {f.name for f in fields(Booking)} - {"id", "created_at", "extra"}


def normalize_time(value: str | None) -> str | None:
    if not value:
        return value
    if len(value) == 5 and TIME_HH_MM.match(value):
        return f"{value}:00"
    if len(value) == 8 and TIME_HH_MM_SS.match(value):
        return value
    raise FormatError("Invalid time format. Please use HH:mm:ss format.")


def normalize_date(value: str | None) -> str | None:
    if not value:
        return value
    # Rows read back from the store already carry the time suffix
    day = value.split("T", 1)[0]
    if not DATE_YYYY_MM_DD.match(day):
        raise FormatError("Invalid date format. Please use YYYY-MM-DD format.")
    return f"{day}{MIDDAY_SUFFIX}"


class BookingEditSession:
    """
    Draft of a single booking opened in the detail view.

    The draft mirrors the persisted booking, takes field and service edits,
    keeps total_amount derived from the services, and is replaced by the
    server row after a successful save. Closing the session without saving
    simply drops the draft.
    """

    def __init__(
        self,
        booking: Booking,
        repository: BookingRepositoryPort,
        catalog: ServiceCatalogPort,
        project_folders: ProjectFoldersUseCase | None = None,
        send_email: SendEmailUseCase | None = None,
    ) -> None:
        self._repository = repository
        self._catalog = catalog
        self._project_folders = project_folders
        self._send_email = send_email
        self._persisted = booking
        self._draft = booking
        self._logger = logging.getLogger(__name__)

    @property
    def draft(self) -> Booking:
        return self._draft

    @property
    def persisted(self) -> Booking:
        return self._persisted

    @property
    def is_dirty(self) -> bool:
        return self._draft != self._persisted

    def discard(self) -> None:
        self._draft = self._persisted

    def available_services(self) -> list[ServiceCatalogEntry]:
        size = self._draft.property_size or self._persisted.property_size
        return self._catalog.resolve(size)

    def quote(self) -> PriceQuote:
        return build_quote(self._draft.services)

    # Field edits

    def set_field(self, name: str, value: Any) -> None:
        if name not in _BOOKING_FIELDS:
            extra = dict(self._draft.extra)
            extra[name] = value
            self._draft = replace(self._draft, extra=extra)
            return

        if name == "address" and not isinstance(value, Address):
            value = parse_address(value)
        if name == "services":
            value = tuple(value or ())

        previous = getattr(self._draft, name)
        self._draft = replace(self._draft, **{name: value})
        if name == "property_size" and value != previous:
            self.on_category_change()

    # Service edits

    def add_service(self, name: str) -> None:
        entry = next((s for s in self.available_services() if s.name == name), None)
        if entry is None:
            return
        services = list(self._draft.services)
        idx = self._index_of(name)
        if idx > -1:
            services[idx] = replace(services[idx], count=max(services[idx].count, 1) + 1)
        else:
            services.insert(0, SelectedService(name=entry.name, price=entry.price, count=1))
        self._set_services(services)

    def add_custom_service(self, name: str, price: Any) -> bool:
        name = (name or "").strip()
        if not name:
            return False
        try:
            parsed = float(price)
        except (TypeError, ValueError):
            return False
        if math.isnan(parsed) or math.isinf(parsed) or parsed < 0:
            return False

        services = [SelectedService(name=name, price=parsed, count=1), *self._draft.services]
        self._set_services(services)
        return True

    def remove_service(self, name: str) -> None:
        self.decrement(name)

    def increment(self, name: str) -> None:
        idx = self._index_of(name)
        if idx == -1:
            return
        services = list(self._draft.services)
        services[idx] = replace(services[idx], count=max(services[idx].count, 1) + 1)
        self._set_services(services)

    def decrement(self, name: str) -> None:
        idx = self._index_of(name)
        if idx == -1:
            return
        services = list(self._draft.services)
        if services[idx].count > 1:
            services[idx] = replace(services[idx], count=services[idx].count - 1)
        else:
            del services[idx]
        self._set_services(services)

    def reorder(self, index: int, direction: str) -> None:
        services = list(self._draft.services)
        if direction == "up":
            if index <= 0 or index >= len(services):
                return
            other = index - 1
        elif direction == "down":
            if index < 0 or index >= len(services) - 1:
                return
            other = index + 1
        else:
            return
        services[index], services[other] = services[other], services[index]
        self._set_services(services)

    def on_category_change(self) -> None:
        catalog = {entry.name: entry.price for entry in self.available_services()}
        updated = False
        services: list[SelectedService] = []
        for service in self._draft.services:
            price = catalog.get(service.name)
            if price is not None and price != service.price:
                services.append(replace(service, price=price))
                updated = True
            else:
                services.append(service)
        if updated:
            self._logger.info(
                "Reconciled service prices",
                extra={"booking_id": self._draft.id, "size": self._draft.property_size},
            )
            self._set_services(services)

    # Persistence

    def save(self) -> Booking:
        record = to_record(self._draft)
        record["time"] = normalize_time(self._draft.time)
        record["preferred_date"] = normalize_date(self._draft.preferred_date)

        try:
            rows = self._repository.upsert([record])
        except RemoteError as e:
            self._logger.error("Error saving booking", extra={"booking_id": self._draft.id, "error": str(e)})
            raise
        if not rows:
            raise RemoteError("No data returned after update")

        saved = rows[0]
        self._persisted = saved
        self._draft = saved
        self._logger.info("Booking saved", extra={"booking_id": saved.id})
        return saved

    def create_project_folders(self) -> ProjectFolders:
        if self._project_folders is None:
            raise RuntimeError("Project folder provisioning is not configured")

        folders, saved = self._project_folders.execute(self._draft)
        self._persisted = saved
        self._draft = replace(
            self._draft,
            raw_photos_link=folders.raw_photos_link,
            final_edits_link=folders.final_edits_link,
        )
        return folders

    def send_email(self, to: str, subject: str, html: str) -> None:
        if self._send_email is None:
            raise RuntimeError("Email sending is not configured")

        self._send_email.execute(to=to, subject=subject, html=html, booking_id=self._persisted.id)
        refreshed = self._repository.get_booking(self._persisted.id)
        if refreshed is not None:
            self._persisted = refreshed
            self._draft = replace(self._draft, delivery_email_sent=refreshed.delivery_email_sent)

    def _index_of(self, name: str) -> int:
        for idx, service in enumerate(self._draft.services):
            if service.name == name:
                return idx
        return -1

    def _set_services(self, services: list[SelectedService]) -> None:
        self._draft = replace(
            self._draft,
            services=tuple(services),
            total_amount=aggregate_total(services),
        )
