from __future__ import annotations

import re
from datetime import date, datetime, timezone
from urllib.parse import quote

from app.domain.entities.booking import Address


def format_currency(amount: float | None) -> str:
    if amount is None:
        return "N/A"
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def parse_preferred_date(value: str | None) -> date | None:
    """
    Read a preferred_date value as a calendar date.
    Date-only values are read at midday so no timezone shift can move them to a neighbouring day.
    """
    if not value:
        return None
    text = value if "T" in value else f"{value}T12:00:00"
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date(value: str | date | None) -> str:
    if not value:
        return "N/A"
    if isinstance(value, date):
        parsed: date | None = value
    else:
        parsed = parse_preferred_date(value)
    if parsed is None:
        return str(value)
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_relative_time(value: str | datetime | None, now: datetime | None = None) -> str:
    if not value:
        return "N/A"
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return str(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)

    seconds = int((current - moment).total_seconds())
    if seconds < 60:
        return "just now" if seconds <= 5 else _plural(seconds, "second")
    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    days = hours // 24
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    if days < 365:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")


def format_address(address: Address) -> str:
    street2 = f", {address.street2}" if address.street2 else ""
    return f"{address.street}{street2}, {address.city}, {address.province} {address.zip_code}".strip()


def format_short_address(address: Address) -> str:
    city = f", {address.city}" if address.city else ""
    return f"{address.street}{city}"


def google_maps_link(address: Address) -> str:
    destination = quote(format_address(address), safe="")
    return f"https://www.google.com/maps/dir/?api=1&destination={destination}"


_FOLDER_UNSAFE = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")


def project_folder_name(street: str, client_name: str) -> str:
    name = _FOLDER_UNSAFE.sub("", f"{street} - {client_name}")
    return _WHITESPACE.sub(" ", name).strip()
