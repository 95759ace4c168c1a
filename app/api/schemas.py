from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServiceSchema(BaseModel):
    name: str
    price: float
    count: int = 1


class CatalogEntrySchema(BaseModel):
    name: str
    price: float


class CatalogResponseSchema(BaseModel):
    size: str
    services: list[CatalogEntrySchema]


class QuoteRequestSchema(BaseModel):
    services: list[ServiceSchema] = Field(default_factory=list)


class QuoteResponseSchema(BaseModel):
    subtotal: float
    discount_percent: int
    range_min: float
    range_max: float | None = None
    discount_amount: float
    total: float


class SendEmailRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = ""
    subject: str = ""
    html: str = ""
    booking_id: str | None = Field(default=None, alias="bookingId")


class ComposedEmailSchema(BaseModel):
    to: str
    subject: str
    text: str
    html: str


class CreateFoldersRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    booking_id: str | None = Field(default=None, alias="bookingId")
    property_address: dict[str, Any] | str | None = Field(default=None, alias="propertyAddress")
    agent_name: str = Field(default="", alias="agentName")


class DashboardStateSchema(BaseModel):
    bookings: list[dict[str, Any]]
    loading: bool
    refreshing: bool
    error: str | None = None
    last_updated: str | None = None
    last_updated_relative: str | None = None
    new_bookings_count: int = 0
    polling_interval_seconds: float
