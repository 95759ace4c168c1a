from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


JOB_STATUSES = ("pending", "editing", "delivered", "completed", "cancelled")
PAYMENT_STATUSES = ("not_paid", "paid", "refunded")
EDITING_STATUSES = ("unassigned", "in_editing", "with_editor", "done_editing")
OCCUPANCY_STATUSES = ("Vacant", "Occupied", "Tenanted", "Other")

STATUS_FIELDS = {
    "status": JOB_STATUSES,
    "payment_status": PAYMENT_STATUSES,
    "editing_status": EDITING_STATUSES,
}

LINK_FIELDS = (
    "raw_photos_link",
    "final_edits_link",
    "tour_360_link",
    "editor_link",
    "delivery_page_link",
    "invoice_link",
)


@dataclass(frozen=True)
class Address:
    street: str = ""
    street2: str = ""
    city: str = ""
    province: str = ""
    zip_code: str = ""

    def is_empty(self) -> bool:
        return not any((self.street, self.street2, self.city, self.province, self.zip_code))


@dataclass(frozen=True)
class SelectedService:
    name: str
    price: float
    count: int = 1


@dataclass(frozen=True)
class Booking:
    id: str
    created_at: str | None = None
    agent_name: str = ""
    agent_email: str = ""
    agent_phone: str = ""
    agent_company: str = ""
    address: Address = Address()
    property_size: str = ""
    property_status: str = ""
    services: tuple[SelectedService, ...] = ()
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
    # columns the dashboard does not model, carried through upserts untouched
    extra: dict[str, Any] = field(default_factory=dict)

    def has_project_folders(self) -> bool:
        return bool(self.raw_photos_link or self.final_edits_link)
