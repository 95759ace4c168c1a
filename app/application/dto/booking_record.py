from __future__ import annotations

import json
import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.domain.entities.booking import LINK_FIELDS, Address, Booking, SelectedService


logger = logging.getLogger(__name__)

_STATUS_DEFAULTS = {
    "status": "pending",
    "payment_status": "not_paid",
    "editing_status": "unassigned",
}


def _address_object(value: Any) -> dict[str, Any]:
    if not value:
        return {}
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Unparseable address, using empty address", extra={"reason": "json"})
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


class AddressDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    street: str = ""
    street2: str = ""
    city: str = ""
    province: str = ""
    zip_code: str = Field(default="", alias="zipCode")

    @field_validator("street", "street2", "city", "province", "zip_code", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def to_entity(self) -> Address:
        return Address(
            street=self.street,
            street2=self.street2,
            city=self.city,
            province=self.province,
            zip_code=self.zip_code,
        )


class SelectedServiceDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    price: float = 0.0
    count: int = 1

    @field_validator("name", mode="before")
    @classmethod
    def _name_to_str(cls, value: Any) -> str:
        return str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value: Any) -> float:
        try:
            price = float(value)
        except (TypeError, ValueError):
            logger.warning("Unparseable service price, using 0", extra={"reason": "price"})
            return 0.0
        if math.isnan(price) or math.isinf(price):
            return 0.0
        return price

    @field_validator("count", mode="before")
    @classmethod
    def _default_count(cls, value: Any) -> int:
        try:
            count = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 1
        return count if count >= 1 else 1


class BookingRecordDTO(BaseModel):
    """
    Ingress shape of a bookings row.

    Legacy rows store `address` and `services` either as JSON objects or as
    serialized JSON strings; both are normalized here. Unknown columns are kept
    so they survive a full-record upsert.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    created_at: str | None = None
    agent_name: str = ""
    agent_email: str = ""
    agent_phone: str = ""
    agent_company: str = ""
    address: AddressDTO = Field(default_factory=AddressDTO)
    property_size: str = ""
    property_status: str = ""
    services: list[SelectedServiceDTO] = Field(default_factory=list)
    total_amount: float = 0.0
    status: str = "pending"
    payment_status: str = "not_paid"
    editing_status: str = "unassigned"
    preferred_date: str | None = None
    time: str | None = None
    notes: str = ""
    user_id: str | None = None
    delivery_email_sent: bool = False
    raw_photos_link: str | None = None
    final_edits_link: str | None = None
    tour_360_link: str | None = None
    editor_link: str | None = None
    delivery_page_link: str | None = None
    invoice_link: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator(
        "agent_name", "agent_email", "agent_phone", "agent_company",
        "property_size", "property_status", "notes",
        mode="before",
    )
    @classmethod
    def _text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("status", "payment_status", "editing_status", mode="before")
    @classmethod
    def _status(cls, value: Any, info: ValidationInfo) -> str:
        if value in (None, ""):
            return _STATUS_DEFAULTS[info.field_name]
        return str(value)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> float:
        if value in (None, ""):
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    @field_validator("delivery_email_sent", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("address", mode="before")
    @classmethod
    def _address(cls, value: Any) -> Any:
        return _address_object(value)

    @field_validator("services", mode="before")
    @classmethod
    def _services(cls, value: Any) -> Any:
        if not value:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                logger.warning("Unparseable services, using empty list", extra={"reason": "json"})
                return []
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict) and item.get("name")]

    def to_entity(self) -> Booking:
        return Booking(
            id=self.id,
            created_at=self.created_at,
            agent_name=self.agent_name,
            agent_email=self.agent_email,
            agent_phone=self.agent_phone,
            agent_company=self.agent_company,
            address=self.address.to_entity(),
            property_size=self.property_size,
            property_status=self.property_status,
            services=tuple(
                SelectedService(name=s.name, price=s.price, count=s.count) for s in self.services
            ),
            total_amount=self.total_amount,
            status=self.status,
            payment_status=self.payment_status,
            editing_status=self.editing_status,
            preferred_date=self.preferred_date,
            time=self.time,
            notes=self.notes,
            user_id=self.user_id,
            delivery_email_sent=self.delivery_email_sent,
            raw_photos_link=self.raw_photos_link,
            final_edits_link=self.final_edits_link,
            tour_360_link=self.tour_360_link,
            editor_link=self.editor_link,
            delivery_page_link=self.delivery_page_link,
            invoice_link=self.invoice_link,
            extra=dict(self.model_extra or {}),
        )


def parse_booking(row: dict[str, Any]) -> Booking:
    return BookingRecordDTO.model_validate(row).to_entity()


def parse_bookings(rows: list[dict[str, Any]]) -> list[Booking]:
    return [parse_booking(row) for row in rows]


def address_to_record(address: Address) -> dict[str, str]:
    return {
        "street": address.street,
        "street2": address.street2,
        "city": address.city,
        "province": address.province,
        "zipCode": address.zip_code,
    }


def services_to_record(services: tuple[SelectedService, ...] | list[SelectedService]) -> list[dict[str, Any]]:
    return [{"name": s.name, "price": s.price, "count": s.count} for s in services]


def to_record(booking: Booking) -> dict[str, Any]:
    """Serialize a Booking back to the row shape the store expects."""
    record: dict[str, Any] = dict(booking.extra)
    record.update(
        {
            "id": booking.id,
            "created_at": booking.created_at,
            "agent_name": booking.agent_name,
            "agent_email": booking.agent_email,
            "agent_phone": booking.agent_phone,
            "agent_company": booking.agent_company,
            "address": address_to_record(booking.address),
            "property_size": booking.property_size,
            "property_status": booking.property_status,
            "services": services_to_record(booking.services),
            "total_amount": booking.total_amount,
            "status": booking.status,
            "payment_status": booking.payment_status,
            "editing_status": booking.editing_status,
            "preferred_date": booking.preferred_date,
            "time": booking.time,
            "notes": booking.notes,
            "user_id": booking.user_id,
            "delivery_email_sent": booking.delivery_email_sent,
        }
    )
    for name in LINK_FIELDS:
        record[name] = getattr(booking, name)
    if record["created_at"] is None:
        record.pop("created_at")
    return record


def parse_address(value: Any) -> Address:
    """Normalize an address given as object, JSON string or nothing; unparseable input yields empty fields."""
    return AddressDTO.model_validate(_address_object(value)).to_entity()
